"""
Rules telemetry session store.

Holds the captured rule events for the current session: a bounded buffer,
newest first, plus the capture flag and session id. Observation only; the
store never influences validation.
"""

import structlog

from rules_audit.core.utils.observers import Listener, ObserverList
from rules_audit.telemetry.models import RuleEvent, TelemetryState, generate_session_id

logger = structlog.get_logger()

DEFAULT_MAX_EVENTS = 200


class TelemetryStore:
    """
    Bounded in-memory event buffer with synchronous change notification.

    Disabling capture pauses it: events already captured stay readable.
    """

    def __init__(self, max_events: int = DEFAULT_MAX_EVENTS, enabled: bool = False, console_log: bool = False):
        """
        Initialize the store.

        Args:
            max_events: Buffer capacity; older events are dropped beyond it
            enabled: Whether capture starts enabled
            console_log: Log every captured event
        """
        if max_events <= 0:
            raise ValueError("max_events must be greater than 0")

        self.max_events = max_events
        self.console_log = console_log
        self._default_enabled = enabled
        self._events: list[RuleEvent] = []
        self._enabled = enabled
        self._session_id = generate_session_id()
        self._observers = ObserverList("telemetry_store")

    def add_event(self, event: RuleEvent) -> None:
        """Prepend an event, trim to capacity, and notify. No-op when disabled."""
        if not self._enabled:
            return

        self._events.insert(0, event)
        if len(self._events) > self.max_events:
            del self._events[self.max_events :]

        if self.console_log:
            logger.info(
                "rule_event",
                severity=event.severity.value.upper(),
                rule_id=event.rule_id,
                message=event.message,
            )

        self._observers.notify()

    def get_events(self) -> list[RuleEvent]:
        """Captured events, newest first."""
        return list(self._events)

    def clear_events(self) -> None:
        """Drop all events and start a new session. The enabled flag is kept."""
        self._events = []
        self._session_id = generate_session_id()
        self._observers.notify()

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled
        logger.debug("rules_telemetry_toggled", enabled=enabled)
        self._observers.notify()

    def is_enabled(self) -> bool:
        return self._enabled

    def get_session_id(self) -> str:
        return self._session_id

    def get_state(self) -> TelemetryState:
        return TelemetryState(events=self.get_events(), enabled=self._enabled, session_id=self._session_id)

    def subscribe(self, listener: Listener):
        """Register a change listener; returns its unsubscribe handle."""
        return self._observers.subscribe(listener)

    def reset(self, enabled: bool | None = None) -> None:
        """
        Reinitialize the store: empty buffer, new session, enabled flag back
        to its default (or ``enabled`` when given). Subscribers are kept and
        notified.
        """
        self._events = []
        self._enabled = self._default_enabled if enabled is None else enabled
        self._session_id = generate_session_id()
        self._observers.notify()
