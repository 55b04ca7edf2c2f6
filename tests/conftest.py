"""
Pytest configuration: puts the project root on sys.path and provides
fresh, isolated rules audit components for each test.
"""

import sys
from pathlib import Path

import pytest
import respx

ROOT = Path(__file__).resolve().parent.parent

if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from rules_audit.audit.engine import AuditEngine  # noqa: E402
from rules_audit.rules.loaders import load_rule_definitions  # noqa: E402
from rules_audit.rules.models import RuleCategory, RuleDefinition, RuleSeverity  # noqa: E402
from rules_audit.rules.registry import DiscoveredRuleRegistry, RuleRegistry  # noqa: E402
from rules_audit.telemetry.emit import RuleEmitter  # noqa: E402
from rules_audit.telemetry.store import TelemetryStore  # noqa: E402


def _make_definition(rule_id: str, **overrides) -> RuleDefinition:
    values = {
        "rule_id": rule_id,
        "human_name": rule_id.replace("_", " ").title(),
        "check_description": "Value must be greater than 0",
        "category": RuleCategory.GEOMETRY,
        "field": "value_in",
        "default_severity": RuleSeverity.ERROR,
        "source_function": "validateInputs",
        "source_line": 10,
        **overrides,
    }
    return RuleDefinition(**values)


@pytest.fixture(autouse=True)
def _isolate_respx_global_router():
    """Keep routes registered on respx's global router from leaking between tests."""
    respx.mock.clear()
    respx.mock.reset()
    yield
    respx.mock.clear()
    respx.mock.reset()


@pytest.fixture(scope="session")
def packaged_definitions() -> list[RuleDefinition]:
    return load_rule_definitions()


@pytest.fixture
def packaged_registry(packaged_definitions) -> RuleRegistry:
    return RuleRegistry(packaged_definitions)


@pytest.fixture
def store() -> TelemetryStore:
    return TelemetryStore(enabled=True)


@pytest.fixture
def disabled_store() -> TelemetryStore:
    return TelemetryStore(enabled=False)


@pytest.fixture
def discovered() -> DiscoveredRuleRegistry:
    return DiscoveredRuleRegistry()


@pytest.fixture
def audit_engine(packaged_registry, store) -> AuditEngine:
    return AuditEngine(packaged_registry, store)


@pytest.fixture
def emitter(store, audit_engine, discovered) -> RuleEmitter:
    return RuleEmitter(store, audit_engine, discovered)


@pytest.fixture
def make_definition():
    """Factory for rule definitions with sensible defaults."""
    return _make_definition
