from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from rules_audit.rules.models import RuleCategory, RuleDefinition, RuleSeverity
from rules_audit.telemetry.models import utcnow


class AuditStatus(str, Enum):
    """Outcome of one rule for the current snapshot."""

    FIRED = "fired"
    PASSED = "passed"
    NOT_EVALUATED = "not_evaluated"


class CapturedMessage(BaseModel):
    """Raw validation message captured from a validation run."""

    model_config = ConfigDict(frozen=True)

    field: str | None = None
    message: str
    severity: RuleSeverity


class AuditSnapshot(BaseModel):
    """Every error and warning of one validation run."""

    model_config = ConfigDict(frozen=True)

    errors: tuple[CapturedMessage, ...] = ()
    warnings: tuple[CapturedMessage, ...] = ()
    product_key: str | None = None
    captured_at: datetime = Field(default_factory=utcnow)


class AuditEntry(BaseModel):
    definition: RuleDefinition
    status: AuditStatus
    # The actual validation message when the rule fired
    fired_message: str | None = None
    fired_severity: RuleSeverity | None = None


class CategoryGroup(BaseModel):
    category: RuleCategory
    label: str
    entries: list[AuditEntry]
    fired_count: int
    passed_count: int
    total: int


class AuditSummary(BaseModel):
    total_rules: int
    fired: int
    passed: int
    not_evaluated: int
    # Fired entries broken down by fired severity
    errors: int
    warnings: int
    info: int


class AuditReport(BaseModel):
    """Reconciled view of every rule's status for one snapshot (or none)."""

    entries: list[AuditEntry]
    by_category: list[CategoryGroup]
    summary: AuditSummary
    built_at: datetime = Field(default_factory=utcnow)
    product_key: str | None = None
