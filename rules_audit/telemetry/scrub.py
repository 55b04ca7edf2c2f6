"""
Telemetry scrubbing utilities.

Sanitizes data before it leaves the process through an analytics sink.
"""

import re
from typing import Any

REDACTED = "[REDACTED]"
TRUNCATION_MARKER = "...[truncated]"

# Patterns for sensitive tokens
TOKEN_PATTERNS: list[re.Pattern[str]] = [
    # Bearer tokens
    re.compile(r"Bearer\s+[A-Za-z0-9\-_=]+\.?[A-Za-z0-9\-_=]*\.?[A-Za-z0-9\-_=]*", re.IGNORECASE),
    # JWT-like tokens (three base64 segments)
    re.compile(r"eyJ[A-Za-z0-9\-_=]+\.eyJ[A-Za-z0-9\-_=]+\.[A-Za-z0-9\-_=]+"),
    # Azure SAS tokens
    re.compile(r"[?&](sig|se|sp|sv|sr|spr)=[^&\s]+", re.IGNORECASE),
    # API keys (common query parameter names)
    re.compile(r"[?&](api[_-]?key|apikey|key|token|access[_-]?token|auth[_-]?token)=[^&\s]+", re.IGNORECASE),
    # Supabase service role key
    re.compile(r"service_role[^,}\s]*", re.IGNORECASE),
    # Generic secret assignments
    re.compile(r"password[=:][\"']?[^\"'\s&]+[\"']?", re.IGNORECASE),
    re.compile(r"secret[=:][\"']?[^\"'\s&]+[\"']?", re.IGNORECASE),
]

SENSITIVE_KEYS = (
    "password",
    "token",
    "secret",
    "apikey",
    "api_key",
    "authorization",
    "auth",
    "credential",
    "privatekey",
    "private_key",
)

LIMITS = {
    "MESSAGE_MAX_LENGTH": 2000,
    "STACK_MAX_LENGTH": 4000,
    "MAX_EVENTS_PER_REQUEST": 100,
    "DATA_MAX_DEPTH": 5,
}


def redact_tokens(text: str | None) -> str | None:
    """Replace every sensitive token in ``text`` with ``[REDACTED]``."""
    if not text:
        return text

    result = text
    for pattern in TOKEN_PATTERNS:
        result = pattern.sub(REDACTED, result)
    return result


def truncate(text: str | None, max_length: int) -> str | None:
    if not text or len(text) <= max_length:
        return text
    return text[:max_length] + TRUNCATION_MARKER


def scrub_data(data: Any, depth: int = 0) -> Any:
    """
    Recursively scrub sensitive data.

    Strings are token-redacted, values under sensitive keys are replaced
    wholesale, and nesting deeper than DATA_MAX_DEPTH is cut off.
    """
    if data is None:
        return data

    if depth > LIMITS["DATA_MAX_DEPTH"]:
        return TRUNCATION_MARKER

    if isinstance(data, str):
        return redact_tokens(data)

    if isinstance(data, (list, tuple)):
        return [scrub_data(item, depth + 1) for item in data]

    if isinstance(data, dict):
        result: dict[str, Any] = {}
        for key, value in data.items():
            lower_key = str(key).lower()
            if any(sensitive in lower_key for sensitive in SENSITIVE_KEYS):
                result[key] = REDACTED
            else:
                result[key] = scrub_data(value, depth + 1)
        return result

    return data
