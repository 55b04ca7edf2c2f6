"""
Rules telemetry package.

Observation only: captures which rules fire without changing any
validation outcome.
"""

from rules_audit.telemetry.models import RuleEmitContext, RuleEvent, TelemetryState
from rules_audit.telemetry.sink import HttpTelemetrySink, NullSink, TelemetrySink, create_sink
from rules_audit.telemetry.store import DEFAULT_MAX_EVENTS, TelemetryStore

__all__ = [
    "DEFAULT_MAX_EVENTS",
    "HttpTelemetrySink",
    "NullSink",
    "RuleEmitContext",
    "RuleEvent",
    "TelemetrySink",
    "TelemetryState",
    "TelemetryStore",
    "create_sink",
]
