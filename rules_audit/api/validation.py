from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from rules_audit.api.dependencies import get_rules_runtime
from rules_audit.runtime import RulesAuditRuntime
from rules_audit.telemetry.emit import create_context

router = APIRouter(prefix="/validation", tags=["Validation"])


class CaptureRequest(BaseModel):
    """A validation result produced by an out-of-process validation engine."""

    result: dict[str, Any] = Field(..., description="Validation result with 'errors' and 'warnings' lists")
    source_ref: str = Field(..., min_length=1, description="Validator that produced the result, e.g. 'rules.ts:validate'")
    product_key: str | None = None
    inputs: dict[str, Any] | None = None


@router.post("/capture")
async def capture_validation(
    request: CaptureRequest, runtime: RulesAuditRuntime = Depends(get_rules_runtime)
) -> dict[str, Any]:
    """
    Record a validation run for telemetry and audit.

    The posted result is returned unchanged; with capture disabled this is
    a pure echo.
    """
    context = create_context(request.source_ref, request.product_key, request.inputs)
    return runtime.emitter.wrap_validation_result(request.result, context)
