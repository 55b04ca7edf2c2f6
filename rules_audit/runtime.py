"""
Process-wide wiring of the rules audit components.

Every component takes its state through its constructor; this module
creates the single instance set the running process shares.
"""

import logging
from dataclasses import dataclass
from typing import Any, TypeVar

from rules_audit.audit.engine import AuditEngine
from rules_audit.core.config import Config, config
from rules_audit.core.utils.logging import swallow_errors
from rules_audit.rules.loaders import load_rule_definitions
from rules_audit.rules.registry import DiscoveredRuleRegistry, RuleRegistry
from rules_audit.telemetry.emit import RuleEmitter
from rules_audit.telemetry.models import RuleEmitContext
from rules_audit.telemetry.sink import TelemetrySink, create_sink
from rules_audit.telemetry.store import TelemetryStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class RulesAuditRuntime:
    """The components one process shares."""

    registry: RuleRegistry
    discovered: DiscoveredRuleRegistry
    store: TelemetryStore
    audit: AuditEngine
    emitter: RuleEmitter
    sink: TelemetrySink
    debug_enabled: bool = False


def build_runtime(
    app_config: Config | None = None,
    registry: RuleRegistry | None = None,
    sink: TelemetrySink | None = None,
    enabled: bool | None = None,
) -> RulesAuditRuntime:
    """
    Create a fully wired runtime.

    Args:
        app_config: Configuration to read (defaults to the global config)
        registry: Pre-built registry (defaults to loading the configured dataset)
        sink: Analytics sink (defaults to the configured one, with delivery started)
        enabled: Initial capture state (defaults to the RULES_DEBUG flag)
    """
    app_config = app_config or config
    telemetry_config = app_config.telemetry

    if registry is None:
        registry = RuleRegistry(load_rule_definitions(telemetry_config.registry_path))
    if sink is None:
        sink = create_sink(app_config.sink)
        sink.start()

    store = TelemetryStore(
        max_events=telemetry_config.max_events,
        enabled=telemetry_config.rules_debug if enabled is None else enabled,
        console_log=telemetry_config.console_log,
    )
    discovered = DiscoveredRuleRegistry()
    audit = AuditEngine(registry, store)
    emitter = RuleEmitter(store, audit, discovered, sink)

    return RulesAuditRuntime(
        registry=registry,
        discovered=discovered,
        store=store,
        audit=audit,
        emitter=emitter,
        sink=sink,
        debug_enabled=telemetry_config.rules_debug,
    )


# Global runtime instance
_global_runtime: RulesAuditRuntime | None = None


def get_runtime() -> RulesAuditRuntime:
    """
    Get or create the global runtime instance.

    Returns:
        Global RulesAuditRuntime instance
    """
    global _global_runtime
    if _global_runtime is None:
        _global_runtime = build_runtime()
        logger.info(
            f"Initialized rules audit runtime with {_global_runtime.registry.count()} rules "
            f"(capture {'enabled' if _global_runtime.store.is_enabled() else 'disabled'})"
        )

    return _global_runtime


def get_rule_registry() -> RuleRegistry:
    """The process-wide rule registry, loaded on first use."""
    return get_runtime().registry


def set_runtime(runtime: RulesAuditRuntime | None) -> None:
    """Replace the global runtime (None forces a rebuild on next access)."""
    global _global_runtime
    _global_runtime = runtime


@swallow_errors("wrap_validation_result", fallback=lambda result, context: result)
def wrap_validation_result(result: T, context: RuleEmitContext | dict[str, Any]) -> T:
    """
    Entry point for the validation engine: tap ``result`` through the
    process-wide emitter and hand it back unchanged. A malformed context or
    a registry that fails to load is logged, never raised.
    """
    if not isinstance(context, RuleEmitContext):
        context = RuleEmitContext(**context)
    return get_runtime().emitter.wrap_validation_result(result, context)
