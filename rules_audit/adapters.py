"""
Read-side adapters for debug consumers.

A consumer (a debug panel, the HTTP API) reads a consistent view, can clear
state, and subscribes to changes without reaching into the store or the
audit engine directly.
"""

from collections.abc import Callable
from dataclasses import dataclass

from rules_audit.audit.engine import AuditEngine
from rules_audit.audit.models import AuditReport, AuditSnapshot
from rules_audit.core.config import Config, config
from rules_audit.core.utils.observers import Listener
from rules_audit.telemetry.models import RuleEvent
from rules_audit.telemetry.store import TelemetryStore


@dataclass
class TelemetryView:
    events: list[RuleEvent]
    enabled: bool
    session_id: str
    event_count: int


@dataclass
class AuditView:
    # None while telemetry is disabled
    report: AuditReport | None
    snapshot: AuditSnapshot | None
    enabled: bool


class TelemetryObserver:
    """Telemetry store view with clear/toggle controls."""

    def __init__(self, store: TelemetryStore):
        self.store = store

    def read(self) -> TelemetryView:
        events = self.store.get_events()
        return TelemetryView(
            events=events,
            enabled=self.store.is_enabled(),
            session_id=self.store.get_session_id(),
            event_count=len(events),
        )

    def clear(self) -> None:
        self.store.clear_events()

    def set_enabled(self, enabled: bool) -> None:
        self.store.set_enabled(enabled)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        return self.store.subscribe(listener)


class AuditObserver:
    """Audit report view; changes to either telemetry or the snapshot are observed."""

    def __init__(self, engine: AuditEngine, store: TelemetryStore):
        self.engine = engine
        self.store = store

    def read(self) -> AuditView:
        return AuditView(
            report=self.engine.get_report(),
            snapshot=self.engine.get_snapshot(),
            enabled=self.store.is_enabled(),
        )

    def clear(self) -> None:
        self.engine.clear_snapshot()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Subscribe to telemetry and audit changes; the returned disposer removes both."""
        unsubscribe_store = self.store.subscribe(listener)
        unsubscribe_audit = self.engine.subscribe(listener)

        def unsubscribe() -> None:
            unsubscribe_store()
            unsubscribe_audit()

        return unsubscribe


def is_rules_debug_enabled(app_config: Config | None = None) -> bool:
    """Whether the rules debug UI should be shown (RULES_DEBUG)."""
    return (app_config or config).telemetry.rules_debug
