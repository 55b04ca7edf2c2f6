"""
Main configuration class that composes all configs.
"""

import os

from dotenv import load_dotenv

from rules_audit.core.config.cors_config import CORSConfig
from rules_audit.core.config.logging_config import LoggingConfig
from rules_audit.core.config.sink_config import SinkConfig
from rules_audit.core.config.telemetry_config import TelemetryConfig

# Load environment variables from a .env file
load_dotenv()


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


class Config:
    """Main configuration class."""

    def __init__(self) -> None:
        self.telemetry = TelemetryConfig(
            rules_debug=_env_flag("RULES_DEBUG"),
            max_events=int(os.getenv("RULES_TELEMETRY_MAX_EVENTS", "200")),
            console_log=_env_flag("RULES_CONSOLE_LOG"),
            registry_path=os.getenv("RULES_REGISTRY_PATH") or None,
        )

        self.sink = SinkConfig(
            url=os.getenv("TELEMETRY_SINK_URL") or None,
            timeout=float(os.getenv("TELEMETRY_SINK_TIMEOUT", "5.0")),
            batch_size=int(os.getenv("TELEMETRY_SINK_BATCH_SIZE", "100")),
            flush_interval=float(os.getenv("TELEMETRY_SINK_FLUSH_INTERVAL", "2.0")),
        )

        self.cors = CORSConfig.from_env()

        self.logging = LoggingConfig(
            level=os.getenv("LOG_LEVEL", "INFO"),
            format=os.getenv("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
            file_path=os.getenv("LOG_FILE_PATH"),
        )

        # Development settings
        self.debug = _env_flag("DEBUG")
        self.environment = os.getenv("ENVIRONMENT", "development")

    def validate(self) -> bool:
        """Validate configuration."""
        errors = []

        if self.telemetry.max_events <= 0:
            errors.append("RULES_TELEMETRY_MAX_EVENTS must be greater than 0")

        if self.sink.batch_size <= 0:
            errors.append("TELEMETRY_SINK_BATCH_SIZE must be greater than 0")

        if self.sink.timeout <= 0:
            errors.append("TELEMETRY_SINK_TIMEOUT must be greater than 0")

        if self.sink.flush_interval <= 0:
            errors.append("TELEMETRY_SINK_FLUSH_INTERVAL must be greater than 0")

        if self.telemetry.registry_path and not os.path.exists(self.telemetry.registry_path):
            errors.append(f"RULES_REGISTRY_PATH does not exist: {self.telemetry.registry_path}")

        if errors:
            raise ValueError(f"Configuration errors: {', '.join(errors)}")

        return True


# Global config instance
config = Config()
