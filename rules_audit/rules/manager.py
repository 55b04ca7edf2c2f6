"""
Rules manager view.

Enriches the registry's definitions with section assignments and plain
English condition / action / threshold text for the rules manager page.
The registry itself is never modified.
"""

from enum import Enum

from pydantic import BaseModel, Field

from rules_audit.rules.models import CATEGORY_LABELS, RuleCategory, RuleDefinition, RuleSeverity
from rules_audit.rules.registry import RuleRegistry

MISSING_THRESHOLD = "—"


class RuleSection(str, Enum):
    APPLICATION = "Application"
    PHYSICAL = "Physical"
    DRIVE_AND_CONTROLS = "Drive & Controls"
    BUILD_OPTIONS = "Build Options"


# Tab order
SECTIONS: list[RuleSection] = [
    RuleSection.APPLICATION,
    RuleSection.PHYSICAL,
    RuleSection.DRIVE_AND_CONTROLS,
    RuleSection.BUILD_OPTIONS,
]

SECTION_MAP: dict[RuleCategory, RuleSection] = {
    # What's on the conveyor, environment, safety
    RuleCategory.APPLICATION: RuleSection.APPLICATION,
    RuleCategory.MATERIAL: RuleSection.APPLICATION,
    RuleCategory.SAFETY: RuleSection.APPLICATION,
    RuleCategory.HEIGHT: RuleSection.APPLICATION,
    # Conveyor structure, geometry, belt
    RuleCategory.GEOMETRY: RuleSection.PHYSICAL,
    RuleCategory.PULLEY: RuleSection.PHYSICAL,
    RuleCategory.BELT: RuleSection.PHYSICAL,
    RuleCategory.SHAFT: RuleSection.PHYSICAL,
    RuleCategory.FRAME: RuleSection.PHYSICAL,
    RuleCategory.PCI: RuleSection.PHYSICAL,
    # Motor, speed, gearbox
    RuleCategory.SPEED: RuleSection.DRIVE_AND_CONTROLS,
    RuleCategory.DRIVE: RuleSection.DRIVE_AND_CONTROLS,
    RuleCategory.SPROCKET: RuleSection.DRIVE_AND_CONTROLS,
    RuleCategory.PARAMETER: RuleSection.DRIVE_AND_CONTROLS,
    # Optional components, support
    RuleCategory.CLEAT: RuleSection.BUILD_OPTIONS,
    RuleCategory.SUPPORT: RuleSection.BUILD_OPTIONS,
    RuleCategory.RETURN_SUPPORT: RuleSection.BUILD_OPTIONS,
    RuleCategory.PREMIUM: RuleSection.BUILD_OPTIONS,
}

DEFAULT_ACTIONS: dict[RuleSeverity, str] = {
    RuleSeverity.ERROR: "Block configuration",
    RuleSeverity.WARNING: "Warn engineer",
    RuleSeverity.INFO: "Inform engineer",
}


class ManagerRule(BaseModel):
    """One row of the rules manager table."""

    id: str
    section: RuleSection
    category: str = Field(description="Human-readable category label")
    category_key: RuleCategory
    name: str
    severity: RuleSeverity
    condition: str = Field(description="When does this rule fire?")
    threshold: str
    action: str = Field(description="What happens when it fires?")
    message: str
    fields: list[str]
    source_function: str
    source_line: int
    has_todo: bool = False
    todo_note: str | None = None


def to_manager_rule(definition: RuleDefinition) -> ManagerRule:
    enriched = definition.condition is not None and definition.threshold is not None

    if not enriched:
        return ManagerRule(
            id=definition.rule_id,
            section=SECTION_MAP[definition.category],
            category=CATEGORY_LABELS[definition.category],
            category_key=definition.category,
            name=definition.human_name,
            severity=definition.default_severity,
            condition=definition.check_description,
            threshold=MISSING_THRESHOLD,
            action=definition.action or DEFAULT_ACTIONS[definition.default_severity],
            message=definition.check_description,
            fields=[definition.field],
            source_function=definition.source_function,
            source_line=definition.source_line,
            has_todo=True,
            todo_note=definition.todo_note
            or f"Missing enrichment data for rule {definition.rule_id}. Add condition and threshold to the dataset.",
        )

    return ManagerRule(
        id=definition.rule_id,
        section=SECTION_MAP[definition.category],
        category=CATEGORY_LABELS[definition.category],
        category_key=definition.category,
        name=definition.human_name,
        severity=definition.default_severity,
        condition=definition.condition,
        threshold=definition.threshold,
        action=definition.action or DEFAULT_ACTIONS[definition.default_severity],
        message=definition.check_description,
        fields=[definition.field],
        source_function=definition.source_function,
        source_line=definition.source_line,
        has_todo=definition.todo_note is not None,
        todo_note=definition.todo_note,
    )


def build_manager_rules(registry: RuleRegistry, section: RuleSection | None = None) -> list[ManagerRule]:
    """Manager rows in registry order, optionally limited to one section."""
    rules = [to_manager_rule(d) for d in registry.get_all()]
    if section is not None:
        rules = [r for r in rules if r.section == section]
    return rules
