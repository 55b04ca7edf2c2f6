"""
CORS configuration for the audit API.
"""

import json
import os
from dataclasses import dataclass, field

DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]


@dataclass
class CORSConfig:
    """Origins and headers the audit API accepts from the configurator UI."""

    headers: list[str] = field(default_factory=lambda: ["*"])
    origins: list[str] = field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))

    @classmethod
    def from_env(cls) -> "CORSConfig":
        """Read ``CORS_HEADERS`` / ``CORS_ORIGINS`` as JSON lists; malformed values fall back to the defaults."""
        try:
            headers = json.loads(os.getenv("CORS_HEADERS", '["*"]'))
            origins = json.loads(os.getenv("CORS_ORIGINS", json.dumps(DEFAULT_CORS_ORIGINS)))
        except json.JSONDecodeError:
            return cls()
        return cls(headers=headers, origins=origins)
