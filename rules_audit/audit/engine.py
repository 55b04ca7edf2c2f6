"""
Rules audit engine.

Keeps the snapshot of the latest validation run and reconciles it against
the rule registry: every rule is reported as fired, passed (evaluated but
did not fire), or not evaluated (no run captured yet), grouped by
category with summary counts.

The report is built lazily and cached by reference until the snapshot
changes, so consumers can detect "no change" with an identity check.
"""

from collections.abc import Iterable, Mapping
from typing import Any

import structlog
from pydantic import ValidationError

from rules_audit.audit.matching import MessagePool
from rules_audit.audit.models import (
    AuditEntry,
    AuditReport,
    AuditSnapshot,
    AuditStatus,
    AuditSummary,
    CapturedMessage,
    CategoryGroup,
)
from rules_audit.core.utils.observers import Listener, ObserverList
from rules_audit.rules.models import CATEGORY_LABELS, RuleCategory, RuleDefinition, RuleSeverity
from rules_audit.rules.registry import RuleRegistry
from rules_audit.telemetry.store import TelemetryStore

logger = structlog.get_logger()


def _attr(item: Any, name: str) -> Any:
    if isinstance(item, Mapping):
        return item.get(name)
    return getattr(item, name, None)


def to_captured_message(item: Any) -> CapturedMessage:
    """Copy field/message/severity out of a mapping or an object."""
    return CapturedMessage(
        field=_attr(item, "field"),
        message=_attr(item, "message"),
        severity=_attr(item, "severity"),
    )


def capture_messages(items: Iterable[Any]) -> tuple[CapturedMessage, ...]:
    """Copy every well-formed message; malformed items are logged and skipped."""
    captured = []
    for item in items:
        try:
            captured.append(to_captured_message(item))
        except ValidationError as e:
            logger.warning("audit_message_skipped", item=repr(item), errors=e.error_count())
    return tuple(captured)


def build_audit_report(definitions: list[RuleDefinition], snapshot: AuditSnapshot | None) -> AuditReport:
    """
    Build an audit report by diffing fired validation messages against
    the rule definitions.

    Args:
        definitions: Rule definitions in registry iteration order
        snapshot: Latest validation run, or None if nothing ran yet

    Returns:
        A report with exactly one entry per definition
    """
    if snapshot is None:
        entries = [AuditEntry(definition=d, status=AuditStatus.NOT_EVALUATED) for d in definitions]
        return build_report_from_entries(entries, None)

    pool = MessagePool([*snapshot.errors, *snapshot.warnings])

    entries = []
    for definition in definitions:
        claim = pool.claim(definition)
        if claim is None:
            entries.append(AuditEntry(definition=definition, status=AuditStatus.PASSED))
            continue

        entries.append(
            AuditEntry(
                definition=definition,
                status=AuditStatus.FIRED,
                fired_message=claim.message.message,
                fired_severity=claim.message.severity,
            )
        )

    unattributed = len(pool) - len(pool.claimed_indices)
    if unattributed:
        logger.debug("audit_unattributed_messages", count=unattributed, product_key=snapshot.product_key)

    return build_report_from_entries(entries, snapshot.product_key)


def build_report_from_entries(entries: list[AuditEntry], product_key: str | None) -> AuditReport:
    """Group entries by category in canonical order and compute the summary."""
    grouped: dict[RuleCategory, list[AuditEntry]] = {}
    for entry in entries:
        grouped.setdefault(entry.definition.category, []).append(entry)

    by_category = [
        CategoryGroup(
            category=category,
            label=CATEGORY_LABELS[category],
            entries=grouped[category],
            fired_count=sum(1 for e in grouped[category] if e.status == AuditStatus.FIRED),
            passed_count=sum(1 for e in grouped[category] if e.status == AuditStatus.PASSED),
            total=len(grouped[category]),
        )
        for category in CATEGORY_LABELS
        if category in grouped
    ]

    fired = [e for e in entries if e.status == AuditStatus.FIRED]
    summary = AuditSummary(
        total_rules=len(entries),
        fired=len(fired),
        passed=sum(1 for e in entries if e.status == AuditStatus.PASSED),
        not_evaluated=sum(1 for e in entries if e.status == AuditStatus.NOT_EVALUATED),
        errors=sum(1 for e in fired if e.fired_severity == RuleSeverity.ERROR),
        warnings=sum(1 for e in fired if e.fired_severity == RuleSeverity.WARNING),
        info=sum(1 for e in fired if e.fired_severity == RuleSeverity.INFO),
    )

    return AuditReport(entries=entries, by_category=by_category, summary=summary, product_key=product_key)


class AuditEngine:
    """
    Snapshot holder and report cache.

    Capture and report reads are gated on the telemetry store's enabled
    flag: disabling telemetry disables auditing as well.
    """

    def __init__(self, registry: RuleRegistry, store: TelemetryStore):
        self.registry = registry
        self.store = store
        self._snapshot: AuditSnapshot | None = None
        self._cached_report: AuditReport | None = None
        self._observers = ObserverList("audit_engine")

    def capture_validation_snapshot(
        self,
        errors: Iterable[Any],
        warnings: Iterable[Any],
        product_key: str | None = None,
    ) -> None:
        """
        Replace the snapshot with a copy of one validation run's messages.

        Called from the emit layer after each validation run. Always
        invalidates the cached report, even if the content is unchanged.
        """
        if not self.store.is_enabled():
            return

        self._snapshot = AuditSnapshot(
            errors=capture_messages(errors),
            warnings=capture_messages(warnings),
            product_key=product_key,
        )
        self._cached_report = None

        logger.debug(
            "audit_snapshot_captured",
            errors=len(self._snapshot.errors),
            warnings=len(self._snapshot.warnings),
            product_key=product_key,
        )
        self._observers.notify()

    def get_snapshot(self) -> AuditSnapshot | None:
        return self._snapshot

    def clear_snapshot(self) -> None:
        self._snapshot = None
        self._cached_report = None
        self._observers.notify()

    def subscribe(self, listener: Listener):
        """Register a listener for snapshot changes; returns its unsubscribe handle."""
        return self._observers.subscribe(listener)

    def get_report(self) -> AuditReport | None:
        """
        Current audit report, or None while telemetry is disabled.

        Returns the same object until the snapshot is replaced or cleared.
        """
        if not self.store.is_enabled():
            return None

        if self._cached_report is None:
            self._cached_report = build_audit_report(self.registry.get_all(), self._snapshot)

        return self._cached_report

    def build_report(self, snapshot: AuditSnapshot | None) -> AuditReport:
        """Build an uncached report for an arbitrary snapshot."""
        return build_audit_report(self.registry.get_all(), snapshot)
