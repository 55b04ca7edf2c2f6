"""
Registries for validation rules.

RuleRegistry is the canonical, immutable catalogue of every rule the
calculation engine can fire. DiscoveredRuleRegistry records rules observed
through instrumentation; it only grows, and the first registration of an
id wins.
"""

import json
import logging
import re
from collections import Counter

from rules_audit.core.errors import DuplicateRuleIdError
from rules_audit.rules.models import (
    CATEGORY_LABELS,
    DiscoveredRule,
    ProductScope,
    RuleCategory,
    RuleDefinition,
    RuleSeverity,
)

logger = logging.getLogger(__name__)

MESSAGE_PREFIX_LENGTH = 50
MAX_RULE_ID_LENGTH = 80

_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]")


class RuleRegistry:
    """Immutable lookup over rule definitions, in dataset order."""

    def __init__(self, definitions: list[RuleDefinition]):
        duplicates = [rule_id for rule_id, n in Counter(d.rule_id for d in definitions).items() if n > 1]
        if duplicates:
            raise DuplicateRuleIdError(sorted(duplicates))

        self._definitions: tuple[RuleDefinition, ...] = tuple(definitions)
        self._by_id: dict[str, RuleDefinition] = {d.rule_id: d for d in self._definitions}

    def get_all(self) -> list[RuleDefinition]:
        """All definitions in registry iteration order."""
        return list(self._definitions)

    def get_by_id(self, rule_id: str) -> RuleDefinition | None:
        return self._by_id.get(rule_id)

    def count(self) -> int:
        return len(self._definitions)

    def get_by_category(self, category: RuleCategory) -> list[RuleDefinition]:
        return [d for d in self._definitions if d.category == category]

    def get_by_severity(self, severity: RuleSeverity) -> list[RuleDefinition]:
        return [d for d in self._definitions if d.default_severity == severity]

    def categories(self) -> list[RuleCategory]:
        """Categories that have at least one rule, in canonical display order."""
        present = {d.category for d in self._definitions}
        return [c for c in CATEGORY_LABELS if c in present]

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._by_id

    def __len__(self) -> int:
        return len(self._definitions)


def _sanitize(text: str) -> str:
    return _NON_ALNUM.sub("_", text).lower()


def generate_rule_id(source_ref: str, message: str) -> str:
    """
    Generate a stable rule ID from source location and message.

    Every character outside [A-Za-z0-9] becomes "_" and the result is
    lowercased. The id is the sanitized source ref, "__", and the sanitized
    first 50 characters of the message, cut to 80 characters. Identical
    inputs always give the identical id.

    Args:
        source_ref: Where the rule fired (e.g. "src/models/sliderbed_v1/rules.ts:144")
        message: The fired message text

    Returns:
        Rule id usable for deduplication across sessions
    """
    message_prefix = _sanitize(message[:MESSAGE_PREFIX_LENGTH])
    source_clean = _sanitize(source_ref)
    return f"{source_clean}__{message_prefix}"[:MAX_RULE_ID_LENGTH]


def create_registry_entry(
    rule_id: str,
    source_ref: str,
    severity: RuleSeverity | str,
    **overrides,
) -> DiscoveredRule:
    """Create a discovered rule entry with defaults."""
    values = {
        "rule_id": rule_id,
        "current_source_ref": source_ref,
        "default_severity": severity,
        "product_scope": ProductScope.UNKNOWN,
        "enabled": True,
        **overrides,
    }
    return DiscoveredRule(**values)


class DiscoveredRuleRegistry:
    """
    Registry of rules observed through instrumentation.

    Populated as rules fire; used purely for telemetry bookkeeping.
    """

    def __init__(self) -> None:
        self._rules: dict[str, DiscoveredRule] = {}

    def register(self, entry: DiscoveredRule) -> bool:
        """
        Register a rule if its id is not known yet.

        Returns:
            True if the entry was added, False if the id was already registered
        """
        if entry.rule_id in self._rules:
            return False
        self._rules[entry.rule_id] = entry
        logger.debug(f"Discovered rule {entry.rule_id} at {entry.current_source_ref}")
        return True

    def get(self, rule_id: str) -> DiscoveredRule | None:
        return self._rules.get(rule_id)

    def get_all(self) -> list[DiscoveredRule]:
        return list(self._rules.values())

    def count(self) -> int:
        return len(self._rules)

    def get_by_product(self, product_scope: ProductScope | str) -> list[DiscoveredRule]:
        """Rules scoped to the given product, plus rules scoped to all products."""
        scope = ProductScope(product_scope)
        return [r for r in self._rules.values() if r.product_scope in (scope, ProductScope.ALL)]

    def get_by_severity(self, severity: RuleSeverity | str) -> list[DiscoveredRule]:
        wanted = RuleSeverity(severity)
        return [r for r in self._rules.values() if r.default_severity == wanted]

    def export_json(self) -> str:
        """Export the registry as indented JSON for documentation."""
        return json.dumps([r.model_dump(mode="json") for r in self._rules.values()], indent=2)

    def clear(self) -> None:
        count = len(self._rules)
        self._rules.clear()
        logger.debug(f"Cleared {count} discovered rules")
