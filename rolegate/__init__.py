"""
rolegate - Role-based authorization for FastAPI applications.

This package provides permission and role stores, a cached authorization
engine, an access guard for FastAPI routes and a bearer token revocation
list.

Usage:
    from fastapi import FastAPI
    from rolegate.factory import configure_app

    app = FastAPI()
    configure_app(app)
"""

__version__ = "0.1.0"

# Public API exports
from rolegate.factory import configure_app, create_app
from rolegate.authz import (
    AuthorizationEngine,
    PermissionCache,
    Permissions,
    Roles,
    authorize,
    require_permissions,
)
from rolegate.config import BaseAppSettings, get_settings
from rolegate.errors import AppError, setup_errors
from rolegate.logging import get_logger
from rolegate.schemas import DataResponse, ErrorResponse, ListResponse
from rolegate.security import Identity, get_current_identity
