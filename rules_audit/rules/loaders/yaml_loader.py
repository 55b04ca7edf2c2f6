"""
YAML-based rule definitions loader.

Loads the static rule registry dataset from a YAML file, implementing the
RuleDefinitionLoader interface.
"""

from pathlib import Path
from typing import Any

import structlog
import yaml  # type: ignore
from pydantic import ValidationError

from rules_audit.core.errors import RegistryLoadError
from rules_audit.rules.interface import RuleDefinitionLoader
from rules_audit.rules.models import RuleDefinition

logger = structlog.get_logger()

DEFAULT_DEFINITIONS_PATH = Path(__file__).resolve().parent.parent / "data" / "rule_definitions.yaml"


class YamlRuleDefinitionLoader(RuleDefinitionLoader):
    """
    Loads rule definitions from a YAML document with a top-level ``rules`` list.
    Entries are validated as-is; the list order becomes the registry order.
    """

    def __init__(self, path: str | Path | None = None):
        self.path = Path(path) if path else DEFAULT_DEFINITIONS_PATH

    def load(self) -> list[RuleDefinition]:
        try:
            content = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise RegistryLoadError(f"Rule definitions file not readable: {self.path}", {"error": str(e)}) from e

        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise RegistryLoadError(f"Rule definitions file is not valid YAML: {self.path}", {"error": str(e)}) from e

        if not isinstance(data, dict) or not isinstance(data.get("rules"), list):
            raise RegistryLoadError(f"Rule definitions file has no 'rules' list: {self.path}")

        definitions = [self._parse_definition(index, raw) for index, raw in enumerate(data["rules"])]

        logger.info("rule_definitions_loaded", path=str(self.path), count=len(definitions))
        return definitions

    @staticmethod
    def _parse_definition(index: int, raw: Any) -> RuleDefinition:
        if not isinstance(raw, dict):
            raise RegistryLoadError(f"Rule definition #{index} is not a mapping", {"index": index})

        try:
            return RuleDefinition(**raw)
        except ValidationError as e:
            rule_id = raw.get("rule_id", f"#{index}")
            raise RegistryLoadError(
                f"Invalid rule definition {rule_id}: {e.error_count()} error(s)",
                {"index": index, "rule_id": rule_id, "errors": e.errors(include_url=False)},
            ) from e


def load_rule_definitions(path: str | Path | None = None) -> list[RuleDefinition]:
    """Load rule definitions from ``path`` or the packaged dataset."""
    return YamlRuleDefinitionLoader(path).load()
