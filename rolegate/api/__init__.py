"""
HTTP routers for rolegate.

Every administrative endpoint is protected by the access guard with the
permission its resource requires; ``/auth`` endpoints only need a valid,
unrevoked bearer token.
"""

from fastapi import APIRouter

from rolegate.api.auth import router as auth_router
from rolegate.api.permissions import router as permissions_router
from rolegate.api.roles import router as roles_router
from rolegate.api.users import router as users_router

api_router = APIRouter()
api_router.include_router(auth_router)
api_router.include_router(permissions_router)
api_router.include_router(roles_router)
api_router.include_router(users_router)

__all__ = [
    "api_router",
    "auth_router",
    "permissions_router",
    "roles_router",
    "users_router",
]
