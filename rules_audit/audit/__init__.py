"""
Rules audit package.

Reconciles the latest validation run against the rule registry.
"""

from rules_audit.audit.engine import AuditEngine, build_audit_report
from rules_audit.audit.matching import MESSAGE_MATCH_SCORE, match_score
from rules_audit.audit.models import (
    AuditEntry,
    AuditReport,
    AuditSnapshot,
    AuditStatus,
    AuditSummary,
    CapturedMessage,
    CategoryGroup,
)

__all__ = [
    "MESSAGE_MATCH_SCORE",
    "AuditEngine",
    "AuditEntry",
    "AuditReport",
    "AuditSnapshot",
    "AuditStatus",
    "AuditSummary",
    "CapturedMessage",
    "CategoryGroup",
    "build_audit_report",
    "match_score",
]
