"""
Analytics sink configuration.
"""

from dataclasses import dataclass


@dataclass
class SinkConfig:
    """Configuration for the optional analytics sink fed by the emit layer."""

    url: str | None = None
    timeout: float = 5.0
    batch_size: int = 100
    flush_interval: float = 2.0

    @property
    def enabled(self) -> bool:
        return bool(self.url)
