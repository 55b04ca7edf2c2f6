"""
Rules telemetry configuration.
"""

from dataclasses import dataclass


@dataclass
class TelemetryConfig:
    """Rules telemetry configuration."""

    # Feature flag gating the debug/audit UI; also the default capture state
    rules_debug: bool = False
    max_events: int = 200
    console_log: bool = False
    # Optional override for the packaged rule definitions dataset
    registry_path: str | None = None
