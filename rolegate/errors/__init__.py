"""
Error handling module for rolegate.

This module provides the exception hierarchy and the FastAPI exception
handlers that render it as standardized error responses.

Limitations:
- Error response structure is fixed; customization requires code changes.
- Only HTTP-style errors are supported (exceptions must inherit from AppError or be handled by FastAPI).
"""

from rolegate.errors.exceptions import (
    AppError,
    ConflictError,
    DBError,
    ExpiredTokenError,
    ForbiddenError,
    InvalidTokenError,
    NotFoundError,
    RevokedTokenError,
    UnauthorizedError,
    ValidationError,
)
from rolegate.errors.handlers import register_exception_handlers
from rolegate.errors.manager import setup_errors

__all__ = [
    "setup_errors",
    "register_exception_handlers",
    "AppError",
    "ValidationError",
    "NotFoundError",
    "UnauthorizedError",
    "ForbiddenError",
    "ConflictError",
    "DBError",
    "InvalidTokenError",
    "ExpiredTokenError",
    "RevokedTokenError",
]
