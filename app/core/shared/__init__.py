"""
Shared utilities module

Domain-agnostic helpers used across the application.
"""

from .logger import ColoredFormatter, JSONFormatter, configure_logging

__all__ = [
    "ColoredFormatter",
    "JSONFormatter",
    "configure_logging",
]
