"""
Logging module for rolegate.

This module provides a simple logging interface that integrates with
application settings.

Limitations:
- Only console (stdout) logging is supported out of the box.
"""

from rolegate.logging.formatters import JsonFormatter
from rolegate.logging.manager import Logger, ensure_logger, get_logger, setup_logger

__all__ = [
    "Logger",
    "get_logger",
    "ensure_logger",
    "setup_logger",
    "JsonFormatter",
]
