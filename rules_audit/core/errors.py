"""
Core error classes for the rules audit service.
"""

from typing import Any


class RegistryLoadError(Exception):
    """Raised when the rule definitions dataset cannot be loaded or validated."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.details = details or {}
        super().__init__(message)


class DuplicateRuleIdError(RegistryLoadError):
    """Raised when two rule definitions share the same rule_id."""

    def __init__(self, rule_ids: list[str]) -> None:
        self.rule_ids = rule_ids
        super().__init__(f"Duplicate rule_id(s) in registry: {', '.join(rule_ids)}", {"rule_ids": rule_ids})


class RuleNotFoundError(Exception):
    """Raised by the API layer when a rule id is not in the registry."""

    pass
