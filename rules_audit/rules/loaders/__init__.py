"""
Rule loaders package.

This package contains implementations of the RuleDefinitionLoader interface
for loading rule definitions from different sources.
"""

from rules_audit.rules.loaders.yaml_loader import (
    DEFAULT_DEFINITIONS_PATH,
    YamlRuleDefinitionLoader,
    load_rule_definitions,
)

__all__ = [
    "DEFAULT_DEFINITIONS_PATH",
    "YamlRuleDefinitionLoader",
    "load_rule_definitions",
]
