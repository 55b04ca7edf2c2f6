import structlog
from fastapi import APIRouter, Depends
from pydantic import BaseModel

from rules_audit.adapters import TelemetryObserver
from rules_audit.api.dependencies import get_telemetry_observer
from rules_audit.telemetry.models import RuleEvent

logger = structlog.get_logger()

router = APIRouter(prefix="/telemetry", tags=["Telemetry"])


class TelemetryResponse(BaseModel):
    events: list[RuleEvent]
    enabled: bool
    session_id: str
    event_count: int


class SetEnabledRequest(BaseModel):
    enabled: bool


def _to_response(observer: TelemetryObserver) -> TelemetryResponse:
    view = observer.read()
    return TelemetryResponse(
        events=view.events,
        enabled=view.enabled,
        session_id=view.session_id,
        event_count=view.event_count,
    )


@router.get("", response_model=TelemetryResponse)
async def get_telemetry(observer: TelemetryObserver = Depends(get_telemetry_observer)) -> TelemetryResponse:
    """Captured rule events for the current session, newest first."""
    return _to_response(observer)


@router.post("/clear", response_model=TelemetryResponse)
async def clear_telemetry(observer: TelemetryObserver = Depends(get_telemetry_observer)) -> TelemetryResponse:
    """Drop captured events and start a new session."""
    observer.clear()
    logger.info("telemetry_cleared")
    return _to_response(observer)


@router.post("/enabled", response_model=TelemetryResponse)
async def set_telemetry_enabled(
    request: SetEnabledRequest, observer: TelemetryObserver = Depends(get_telemetry_observer)
) -> TelemetryResponse:
    """Pause or resume capture. Captured events are kept either way."""
    observer.set_enabled(request.enabled)
    logger.info("telemetry_enabled_changed", enabled=request.enabled)
    return _to_response(observer)
