from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class RuleSeverity(str, Enum):
    """Enumerates the severity levels a validation rule can fire with."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class RuleCategory(str, Enum):
    """Fixed set of rule categories."""

    GEOMETRY = "geometry"
    PULLEY = "pulley"
    SPEED = "speed"
    SPROCKET = "sprocket"
    MATERIAL = "material"
    BELT = "belt"
    SHAFT = "shaft"
    CLEAT = "cleat"
    SUPPORT = "support"
    FRAME = "frame"
    HEIGHT = "height"
    RETURN_SUPPORT = "return_support"
    APPLICATION = "application"
    SAFETY = "safety"
    DRIVE = "drive"
    PCI = "pci"
    PARAMETER = "parameter"
    PREMIUM = "premium"


# Key order is the canonical display order for grouped views.
CATEGORY_LABELS: dict[RuleCategory, str] = {
    RuleCategory.GEOMETRY: "Geometry & Layout",
    RuleCategory.PULLEY: "Pulleys",
    RuleCategory.SPEED: "Speed",
    RuleCategory.SPROCKET: "Sprockets & Chain",
    RuleCategory.MATERIAL: "Material & Product",
    RuleCategory.BELT: "Belt",
    RuleCategory.SHAFT: "Shafts",
    RuleCategory.CLEAT: "Cleats",
    RuleCategory.SUPPORT: "Floor Support",
    RuleCategory.FRAME: "Frame",
    RuleCategory.HEIGHT: "Height & Angle",
    RuleCategory.RETURN_SUPPORT: "Return Support",
    RuleCategory.APPLICATION: "Application",
    RuleCategory.SAFETY: "Safety",
    RuleCategory.DRIVE: "Drive",
    RuleCategory.PCI: "Pulley Tube Stress (PCI)",
    RuleCategory.PARAMETER: "Engineering Parameters",
    RuleCategory.PREMIUM: "Premium Features",
}


class RuleDefinition(BaseModel):
    """A single entry of the static rule registry."""

    model_config = ConfigDict(frozen=True)

    rule_id: str = Field(pattern=r"^[a-z0-9_]+$")
    human_name: str = Field(min_length=1)
    check_description: str = Field(min_length=1)
    category: RuleCategory
    field: str = Field(min_length=1)
    default_severity: RuleSeverity
    source_function: str = Field(min_length=1)
    source_line: int = Field(gt=0)
    # Substring that identifies this rule's message with high confidence
    message_match: str | None = None

    # Rules manager enrichment (optional, plain English)
    condition: str | None = None
    action: str | None = None
    threshold: str | None = None
    todo_note: str | None = None


class ProductScope(str, Enum):
    BELT = "belt"
    MAGNETIC = "magnetic"
    ALL = "all"
    UNKNOWN = "unknown"


class DiscoveredRule(BaseModel):
    """A rule observed at runtime through instrumentation, keyed by generated id."""

    rule_id: str
    current_source_ref: str
    default_severity: RuleSeverity
    product_scope: ProductScope = ProductScope.UNKNOWN
    enabled: bool = True
    message_pattern: str | None = None
