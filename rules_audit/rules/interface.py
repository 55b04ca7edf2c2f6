from abc import ABC, abstractmethod

from rules_audit.rules.models import RuleDefinition


class RuleDefinitionLoader(ABC):
    """
    Abstract interface for loading the static rule definitions dataset.

    This interface allows us to swap out different dataset sources
    (packaged YAML, database export, etc.) without changing the registry.
    """

    @abstractmethod
    def load(self) -> list[RuleDefinition]:
        """
        Load every rule definition, in registry iteration order.

        Returns:
            list of validated RuleDefinition objects
        """
        pass
