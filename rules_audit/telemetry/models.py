import random
import string
import time
from datetime import datetime, timezone

from pydantic import BaseModel, Field

from rules_audit.rules.models import RuleSeverity

_ID_ALPHABET = string.ascii_lowercase + string.digits


def _random_suffix(length: int = 7) -> str:
    return "".join(random.choices(_ID_ALPHABET, k=length))


def generate_event_id() -> str:
    """Unique id for one emission, e.g. ``evt_1718000000000_k3j9x0a``."""
    return f"evt_{int(time.time() * 1000)}_{_random_suffix()}"


def generate_session_id() -> str:
    return f"session_{int(time.time() * 1000)}_{_random_suffix()}"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RuleEmitContext(BaseModel):
    """Where a validation run happened and what it was given."""

    source_ref: str
    product_key: str | None = None
    inputs_present: list[str] | None = None


class RuleEvent(BaseModel):
    """A single fired error/warning captured by the emit layer."""

    rule_id: str
    severity: RuleSeverity
    message: str
    product_key: str = "unknown"
    timestamp: datetime = Field(default_factory=utcnow)
    inputs_present: list[str] = Field(default_factory=list)
    source_ref: str
    field: str | None = None
    event_id: str = Field(default_factory=generate_event_id)


class TelemetryState(BaseModel):
    """Read-only view of the telemetry store."""

    events: list[RuleEvent]
    enabled: bool
    session_id: str
