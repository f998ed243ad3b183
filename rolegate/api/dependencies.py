from fastapi import Request

from rolegate.errors.exceptions import AppError
from rolegate.users.service import UserService


def get_user_service(request: Request) -> UserService:
    """FastAPI dependency returning the application's user service."""
    service = getattr(request.app.state, "users", None)
    if service is None:
        raise AppError(message="User service not initialized")
    return service
