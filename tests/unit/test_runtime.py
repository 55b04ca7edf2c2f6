from unittest.mock import MagicMock

import pytest

from rules_audit import runtime as runtime_module
from rules_audit.core.config import Config
from rules_audit.rules.registry import RuleRegistry
from rules_audit.runtime import build_runtime, get_rule_registry, get_runtime, set_runtime, wrap_validation_result
from rules_audit.telemetry.sink import HttpTelemetrySink, NullSink


@pytest.fixture
def reset_global_runtime():
    set_runtime(None)
    yield
    set_runtime(None)


class TestBuildRuntime:
    def test_wires_shared_components(self, make_definition):
        registry = RuleRegistry([make_definition("only")])

        runtime = build_runtime(Config(), registry=registry, sink=NullSink(), enabled=True)

        assert runtime.registry is registry
        assert runtime.audit.store is runtime.store
        assert runtime.emitter.store is runtime.store
        assert runtime.emitter.audit_engine is runtime.audit
        assert runtime.emitter.discovered is runtime.discovered
        assert runtime.store.is_enabled() is True

    def test_enabled_defaults_to_rules_debug(self, monkeypatch):
        monkeypatch.setenv("RULES_DEBUG", "true")
        monkeypatch.delenv("TELEMETRY_SINK_URL", raising=False)
        monkeypatch.delenv("RULES_REGISTRY_PATH", raising=False)

        runtime = build_runtime(Config())

        assert runtime.store.is_enabled() is True
        assert runtime.debug_enabled is True
        assert isinstance(runtime.sink, NullSink)
        assert runtime.registry.count() > 0

    def test_capacity_from_config(self, monkeypatch, make_definition):
        monkeypatch.setenv("RULES_TELEMETRY_MAX_EVENTS", "25")

        runtime = build_runtime(Config(), registry=RuleRegistry([make_definition("only")]))

        assert runtime.store.max_events == 25

    def test_configured_sink_starts_delivery(self, monkeypatch, make_definition):
        monkeypatch.setenv("TELEMETRY_SINK_URL", "https://telemetry.example.com/api/events")

        runtime = build_runtime(Config(), registry=RuleRegistry([make_definition("only")]))

        try:
            assert isinstance(runtime.sink, HttpTelemetrySink)
            assert runtime.sink.running
        finally:
            runtime.sink.stop()


@pytest.mark.usefixtures("reset_global_runtime")
class TestGlobalRuntime:
    def test_get_runtime_is_singleton(self):
        assert get_runtime() is get_runtime()

    def test_get_rule_registry(self, make_definition):
        runtime = build_runtime(registry=RuleRegistry([make_definition("only")]), sink=NullSink())
        set_runtime(runtime)

        assert get_rule_registry() is runtime.registry

    def test_set_runtime(self, make_definition):
        runtime = build_runtime(registry=RuleRegistry([make_definition("only")]), sink=NullSink(), enabled=True)
        set_runtime(runtime)

        assert get_runtime() is runtime

    def test_wrap_validation_result_uses_global_emitter(self, make_definition):
        runtime = build_runtime(registry=RuleRegistry([make_definition("only")]), sink=NullSink(), enabled=True)
        set_runtime(runtime)
        result = {"errors": [{"field": "value_in", "message": "Value must be greater than 0", "severity": "error"}]}

        returned = wrap_validation_result(result, {"source_ref": "rules.ts:validate", "product_key": "belt"})

        assert returned is result
        assert runtime.store.get_events()[0].product_key == "belt"
        assert runtime.audit.get_report().summary.fired == 1

    def test_wrap_validation_result_delegates(self, monkeypatch):
        fake = MagicMock()
        fake.emitter.wrap_validation_result.side_effect = lambda result, context: result
        monkeypatch.setattr(runtime_module, "_global_runtime", fake)
        result = object()

        assert wrap_validation_result(result, {"source_ref": "x"}) is result
        fake.emitter.wrap_validation_result.assert_called_once()

    def test_malformed_context_returns_result(self, make_definition):
        runtime = build_runtime(registry=RuleRegistry([make_definition("only")]), sink=NullSink(), enabled=True)
        set_runtime(runtime)
        result = {"errors": [], "warnings": []}

        assert wrap_validation_result(result, {"product_key": "belt"}) is result
        assert runtime.audit.get_snapshot() is None

    def test_failing_runtime_build_returns_result(self, monkeypatch):
        def broken_build():
            raise FileNotFoundError("rule_definitions.yaml")

        monkeypatch.setattr(runtime_module, "build_runtime", broken_build)
        result = object()

        assert wrap_validation_result(result, {"source_ref": "rules.ts:validate"}) is result
