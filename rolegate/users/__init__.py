from rolegate.users.repository import UserRepository
from rolegate.users.service import UserService
from rolegate.users.manager import seed_users, setup_users

__all__ = ["UserRepository", "UserService", "setup_users", "seed_users"]
