"""Rules audit and telemetry for the conveyor configurator's validation engine."""

__version__ = "0.1.0"
