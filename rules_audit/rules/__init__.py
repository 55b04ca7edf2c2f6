# Rules package

from rules_audit.rules.models import (
    CATEGORY_LABELS,
    DiscoveredRule,
    ProductScope,
    RuleCategory,
    RuleDefinition,
    RuleSeverity,
)
from rules_audit.rules.registry import (
    DiscoveredRuleRegistry,
    RuleRegistry,
    create_registry_entry,
    generate_rule_id,
)

__all__ = [
    "CATEGORY_LABELS",
    "DiscoveredRule",
    "DiscoveredRuleRegistry",
    "ProductScope",
    "RuleCategory",
    "RuleDefinition",
    "RuleRegistry",
    "RuleSeverity",
    "create_registry_entry",
    "generate_rule_id",
]
