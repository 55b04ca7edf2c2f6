import structlog
from fastapi import APIRouter, Depends
from pydantic import BaseModel

from rules_audit.adapters import AuditObserver, is_rules_debug_enabled
from rules_audit.api.dependencies import get_audit_observer
from rules_audit.audit.models import AuditReport, AuditSnapshot, AuditSummary

logger = structlog.get_logger()

router = APIRouter(prefix="/audit", tags=["Audit"])


class AuditResponse(BaseModel):
    # None while telemetry is disabled
    report: AuditReport | None
    snapshot: AuditSnapshot | None
    enabled: bool


class AuditSummaryResponse(BaseModel):
    summary: AuditSummary | None
    product_key: str | None = None
    enabled: bool


class DebugEnabledResponse(BaseModel):
    enabled: bool


@router.get("", response_model=AuditResponse)
async def get_audit(observer: AuditObserver = Depends(get_audit_observer)) -> AuditResponse:
    """Full audit report for the latest captured validation run."""
    view = observer.read()
    return AuditResponse(report=view.report, snapshot=view.snapshot, enabled=view.enabled)


@router.get("/summary", response_model=AuditSummaryResponse)
async def get_audit_summary(observer: AuditObserver = Depends(get_audit_observer)) -> AuditSummaryResponse:
    view = observer.read()
    if view.report is None:
        return AuditSummaryResponse(summary=None, enabled=view.enabled)
    return AuditSummaryResponse(summary=view.report.summary, product_key=view.report.product_key, enabled=view.enabled)


@router.post("/clear", response_model=AuditResponse)
async def clear_audit(observer: AuditObserver = Depends(get_audit_observer)) -> AuditResponse:
    """Forget the captured snapshot; every rule goes back to not evaluated."""
    observer.clear()
    logger.info("audit_snapshot_cleared")
    view = observer.read()
    return AuditResponse(report=view.report, snapshot=view.snapshot, enabled=view.enabled)


@router.get("/debug-enabled", response_model=DebugEnabledResponse)
async def get_debug_enabled() -> DebugEnabledResponse:
    """Whether the rules debug UI should be shown."""
    return DebugEnabledResponse(enabled=is_rules_debug_enabled())
