"""
Logger construction for rolegate.

Every module logs through a named ``logging.Logger``. Level and output
format come from the application settings: ``LOG_LEVEL``, ``DEBUG``
(forces DEBUG) and ``LOG_JSON_FORMAT`` (one JSON object per line, see
``JsonFormatter``). Authorization denials are logged at WARNING and
mutations of roles, permissions and users at INFO.
"""

import logging
import sys
from typing import Optional

from rolegate.config.base import BaseAppSettings
from rolegate.logging.formatters import JsonFormatter

Logger = logging.Logger

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logger(
    name: str,
    level: str = "INFO",
    format: str = DEFAULT_FORMAT,
    debug: bool = False,
    json_format: bool = False,
) -> logging.Logger:
    """
    Configure the logger ``name`` with a single stdout handler.

    Calling it again for the same name replaces the handler instead of
    adding a second one.

    Args:
        name: Logger name (usually __name__)
        level: Level name; unknown names fall back to INFO
        format: Line format for plain-text output
        debug: Force DEBUG regardless of ``level``
        json_format: Emit JSON lines instead of plain text
    """
    log_level = logging.DEBUG if debug else getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(JsonFormatter() if json_format else logging.Formatter(format))

    logger = logging.getLogger(name)
    logger.setLevel(log_level)
    logger.handlers.clear()
    logger.addHandler(handler)
    return logger


def get_logger(
    name: str, settings: Optional[BaseAppSettings] = None, json_format: bool = False
) -> logging.Logger:
    """Build the logger ``name`` from ``settings``, or at INFO without them."""
    if settings is None:
        return setup_logger(name, json_format=json_format)
    return setup_logger(
        name,
        level=settings.LOG_LEVEL or "INFO",
        debug=bool(settings.DEBUG),
        json_format=json_format or bool(settings.LOG_JSON_FORMAT),
    )


def ensure_logger(
    logger: Optional[logging.Logger] = None,
    name: str = None,
    settings: Optional[BaseAppSettings] = None,
    json_format: bool = False,
) -> logging.Logger:
    """
    Return ``logger`` if given, else build one named ``name``.

    Components such as the authorization engine and the user service
    accept an optional logger; this is how they fall back to their own.

    Raises:
        ValueError: Neither a logger nor a name was given
    """
    if logger:
        return logger
    if not name:
        raise ValueError("Module name must be provided when logger is not specified")
    return get_logger(name, settings, json_format)
