"""
Structured logging utilities.

Provides logging setup and a guard decorator for side-channel code paths
that must never raise into their caller.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable  # noqa: TCH003
from functools import wraps
from typing import Any

import structlog

from rules_audit.core.config.logging_config import LoggingConfig

logger = logging.getLogger(__name__)


def configure_logging(logging_config: LoggingConfig) -> None:
    """
    Apply the configured level and format to stdlib logging and route
    structlog through it.

    Args:
        logging_config: Logging section of the global config.
    """
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if logging_config.file_path:
        handlers.append(logging.FileHandler(logging_config.file_path))

    logging.basicConfig(
        level=logging_config.level.upper(),
        format=logging_config.format,
        handlers=handlers,
    )

    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.KeyValueRenderer(key_order=["event"]),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def swallow_errors(operation: str | None = None, fallback: Callable[..., Any] | None = None) -> Any:
    """
    Decorator for calls that run beside a caller's main path.

    Any exception raised by the wrapped function is logged with timing and
    discarded. The decorated call then returns ``fallback(*args, **kwargs)``
    when a fallback is given, otherwise ``None``.

    Args:
        operation: Custom operation name (defaults to function name)
        fallback: Produces the return value after a failure

    Example:
        @swallow_errors("wrap_validation_result", fallback=lambda self, result, ctx: result)
        def wrap_validation_result(self, result, ctx): ...
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        op_name = operation or func.__name__

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            start_time = time.time()
            try:
                return func(*args, **kwargs)
            except Exception as e:
                latency_ms = int((time.time() - start_time) * 1000)
                logger.error(
                    f"❌ {op_name} failed after {latency_ms}ms, error discarded: {e}",
                    exc_info=True,
                )
                if fallback is None:
                    return None
                return fallback(*args, **kwargs)

        return wrapper

    return decorator
