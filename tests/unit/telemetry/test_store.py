import pytest

from rules_audit.rules.models import RuleSeverity
from rules_audit.telemetry.models import RuleEvent
from rules_audit.telemetry.store import DEFAULT_MAX_EVENTS, TelemetryStore


def _event(n: int, severity: RuleSeverity = RuleSeverity.ERROR) -> RuleEvent:
    return RuleEvent(rule_id=f"rule_{n}", severity=severity, message=f"Message {n}", source_ref="rules.ts:1")


class TestTelemetryStore:
    def test_defaults(self):
        store = TelemetryStore()

        assert store.max_events == DEFAULT_MAX_EVENTS == 200
        assert store.is_enabled() is False
        assert store.get_events() == []
        assert store.get_session_id().startswith("session_")

    def test_invalid_capacity(self):
        with pytest.raises(ValueError):
            TelemetryStore(max_events=0)

    def test_newest_first(self, store):
        store.add_event(_event(1))
        store.add_event(_event(2))

        assert [e.rule_id for e in store.get_events()] == ["rule_2", "rule_1"]

    def test_capacity_drops_oldest(self):
        store = TelemetryStore(max_events=3, enabled=True)
        for n in range(5):
            store.add_event(_event(n))

        assert [e.rule_id for e in store.get_events()] == ["rule_4", "rule_3", "rule_2"]

    def test_default_capacity(self, store):
        for n in range(DEFAULT_MAX_EVENTS + 25):
            store.add_event(_event(n))

        events = store.get_events()
        assert len(events) == DEFAULT_MAX_EVENTS
        assert events[0].rule_id == f"rule_{DEFAULT_MAX_EVENTS + 24}"

    def test_disabled_store_ignores_events(self, disabled_store):
        disabled_store.add_event(_event(1))

        assert disabled_store.get_events() == []

    def test_get_events_returns_copy(self, store):
        store.add_event(_event(1))
        store.get_events().clear()

        assert len(store.get_events()) == 1

    def test_clear_rotates_session(self, store):
        store.add_event(_event(1))
        session_before = store.get_session_id()

        store.clear_events()

        assert store.get_events() == []
        assert store.get_session_id() != session_before
        assert store.is_enabled() is True

    def test_disable_keeps_events(self, store):
        store.add_event(_event(1))
        store.set_enabled(False)

        assert store.is_enabled() is False
        assert len(store.get_events()) == 1

        store.add_event(_event(2))
        assert [e.rule_id for e in store.get_events()] == ["rule_1"]

    def test_get_state(self, store):
        store.add_event(_event(1))

        state = store.get_state()

        assert state.enabled is True
        assert state.session_id == store.get_session_id()
        assert [e.rule_id for e in state.events] == ["rule_1"]

    def test_reset(self, store):
        store.add_event(_event(1))
        store.set_enabled(False)
        session_before = store.get_session_id()

        store.reset()

        assert store.get_events() == []
        assert store.is_enabled() is True
        assert store.get_session_id() != session_before

    def test_reset_with_explicit_flag(self, store):
        store.reset(enabled=False)

        assert store.is_enabled() is False


class TestTelemetryStoreNotifications:
    def test_mutations_notify(self, store):
        calls = []
        store.subscribe(lambda: calls.append("changed"))

        store.add_event(_event(1))
        store.clear_events()
        store.set_enabled(False)

        assert calls == ["changed", "changed", "changed"]

    def test_disabled_add_does_not_notify(self, disabled_store):
        calls = []
        disabled_store.subscribe(lambda: calls.append("changed"))

        disabled_store.add_event(_event(1))

        assert calls == []

    def test_unsubscribe(self, store):
        calls = []
        unsubscribe = store.subscribe(lambda: calls.append("changed"))

        unsubscribe()
        unsubscribe()
        store.add_event(_event(1))

        assert calls == []

    def test_listener_sees_committed_state(self, store):
        seen = []
        store.subscribe(lambda: seen.append(len(store.get_events())))

        store.add_event(_event(1))
        store.add_event(_event(2))

        assert seen == [1, 2]
