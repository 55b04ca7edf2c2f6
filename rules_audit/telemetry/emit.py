"""
Rules telemetry emit layer.

Wraps validation results to capture telemetry without changing them:
every wrapper returns the exact object it was given, and nothing raised
inside this layer reaches the validation call path.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, TypeVar

import structlog

from rules_audit.core.utils.logging import swallow_errors
from rules_audit.rules.models import RuleSeverity
from rules_audit.rules.registry import DiscoveredRuleRegistry, create_registry_entry, generate_rule_id
from rules_audit.telemetry.models import RuleEmitContext, RuleEvent
from rules_audit.telemetry.sink import NullSink, TelemetrySink
from rules_audit.telemetry.store import TelemetryStore

if TYPE_CHECKING:
    from rules_audit.audit.engine import AuditEngine

logger = structlog.get_logger()

T = TypeVar("T")


def _attr(item: Any, name: str) -> Any:
    if isinstance(item, Mapping):
        return item.get(name)
    return getattr(item, name, None)


def get_inputs_present(inputs: Mapping[str, Any]) -> list[str]:
    """Names of inputs that have a value (None counts as absent)."""
    return [key for key, value in inputs.items() if value is not None]


def create_context(
    source_ref: str,
    product_key: str | None = None,
    inputs: Mapping[str, Any] | None = None,
) -> RuleEmitContext:
    """Create an emit context from common parameters."""
    return RuleEmitContext(
        source_ref=source_ref,
        product_key=product_key,
        inputs_present=get_inputs_present(inputs) if inputs is not None else None,
    )


class RuleEmitter:
    """
    Side-channel tap on validation results.

    Feeds the telemetry store, the discovered-rule registry, the analytics
    sink and the audit snapshot. When the store is disabled every call is a
    no-op.
    """

    def __init__(
        self,
        store: TelemetryStore,
        audit_engine: AuditEngine,
        discovered: DiscoveredRuleRegistry,
        sink: TelemetrySink | None = None,
    ):
        self.store = store
        self.audit_engine = audit_engine
        self.discovered = discovered
        self.sink = sink or NullSink()

    def emit_rule_event(
        self,
        severity: RuleSeverity | str,
        message: str,
        context: RuleEmitContext,
        field: str | None = None,
        rule_id: str | None = None,
    ) -> None:
        """
        Emit a single rule event.

        Args:
            severity: Severity the rule fired with
            message: Fired message text
            context: Source location, product and inputs of the run
            field: Input/output field the message is attached to
            rule_id: Known rule id; generated from source and message otherwise
        """
        if not self.store.is_enabled():
            return

        severity = RuleSeverity(severity)
        rule_id = rule_id or generate_rule_id(context.source_ref, message)

        event = RuleEvent(
            rule_id=rule_id,
            severity=severity,
            message=message,
            product_key=context.product_key or "unknown",
            inputs_present=context.inputs_present or [],
            source_ref=context.source_ref,
            field=field,
        )

        self.discovered.register(
            create_registry_entry(rule_id, context.source_ref, severity, message_pattern=message)
        )
        self.store.add_event(event)
        self._forward_to_sink(event)

    def _forward_to_sink(self, event: RuleEvent) -> None:
        try:
            self.sink.track_rule_fired(
                event.rule_id,
                event.severity,
                event.message,
                {"product_key": event.product_key},
            )
        except Exception as e:
            logger.warning("telemetry_sink_failed", rule_id=event.rule_id, error=str(e))

    @swallow_errors("wrap_validation_errors", fallback=lambda self, errors, context: errors)
    def wrap_validation_errors(self, errors: T, context: RuleEmitContext) -> T:
        """Emit an event per error. Returns ``errors`` unchanged."""
        if not self.store.is_enabled():
            return errors

        for error in errors:  # type: ignore[attr-defined]
            self.emit_rule_event(RuleSeverity.ERROR, _attr(error, "message"), context, _attr(error, "field"))

        return errors

    @swallow_errors("wrap_validation_warnings", fallback=lambda self, warnings, context: warnings)
    def wrap_validation_warnings(self, warnings: T, context: RuleEmitContext) -> T:
        """Emit an event per warning, keeping its own severity. Returns ``warnings`` unchanged."""
        if not self.store.is_enabled():
            return warnings

        for warning in warnings:  # type: ignore[attr-defined]
            severity = _attr(warning, "severity") or RuleSeverity.WARNING
            self.emit_rule_event(severity, _attr(warning, "message"), context, _attr(warning, "field"))

        return warnings

    @swallow_errors("wrap_validation_result", fallback=lambda self, result, context: result)
    def wrap_validation_result(self, result: T, context: RuleEmitContext) -> T:
        """
        Wrap a combined validation result (errors + warnings).

        Emits one event per message, then replaces the audit snapshot.
        Returns ``result`` itself; when telemetry is disabled nothing else
        happens.
        """
        if not self.store.is_enabled():
            return result

        # read once: the result may hold one-shot iterables
        errors = list(_attr(result, "errors") or [])
        warnings = list(_attr(result, "warnings") or [])

        self.wrap_validation_errors(errors, context)
        self.wrap_validation_warnings(warnings, context)

        self.audit_engine.capture_validation_snapshot(errors, warnings, context.product_key)

        return result
