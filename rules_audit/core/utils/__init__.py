"""
Core utilities for the rules audit service.

This module provides shared infrastructure:
- Observer lists for synchronous subscribe/notify
- Logging setup and the side-channel error guard
"""

from rules_audit.core.utils.logging import configure_logging, swallow_errors
from rules_audit.core.utils.observers import Listener, ObserverList

__all__ = [
    "Listener",
    "ObserverList",
    "configure_logging",
    "swallow_errors",
]
