"""
Canonical permission and role names.

Use these constants instead of string literals. When adding a permission,
add it here; seeding creates it on the next start.
"""

from typing import Dict, Tuple


class Permissions:
    WORDS_READ = "words:read"
    WORDS_WRITE = "words:write"
    TESTS_READ = "tests:read"
    TESTS_WRITE = "tests:write"
    USERS_READ = "users:read"
    USERS_WRITE = "users:write"
    ROLES_READ = "roles:read"
    ROLES_WRITE = "roles:write"
    PERMISSIONS_READ = "permissions:read"
    PERMISSIONS_WRITE = "permissions:write"

    @classmethod
    def all(cls) -> Tuple[str, ...]:
        return tuple(
            value
            for key, value in vars(cls).items()
            if key.isupper() and isinstance(value, str)
        )


class Roles:
    STUDENT = "student"
    TEACHER = "teacher"
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"

    @classmethod
    def all(cls) -> Tuple[str, ...]:
        return (cls.STUDENT, cls.TEACHER, cls.ADMIN, cls.SUPER_ADMIN)


# The one role that holds every permission and can never be mutated
RESERVED_ROLE = Roles.SUPER_ADMIN

_TEACHER_BASELINE = (
    Permissions.WORDS_READ,
    Permissions.WORDS_WRITE,
    Permissions.TESTS_READ,
    Permissions.TESTS_WRITE,
)

# Additive baseline links created by seeding. The reserved role has none.
BASELINE_ASSIGNMENTS: Dict[str, Tuple[str, ...]] = {
    Roles.STUDENT: (Permissions.WORDS_READ,),
    Roles.TEACHER: _TEACHER_BASELINE,
    Roles.ADMIN: _TEACHER_BASELINE
    + (
        Permissions.USERS_READ,
        Permissions.USERS_WRITE,
        Permissions.ROLES_READ,
        Permissions.ROLES_WRITE,
        Permissions.PERMISSIONS_READ,
        Permissions.PERMISSIONS_WRITE,
    ),
}


def split_permission_name(name: str) -> Tuple[str, str]:
    """Split ``resource:action`` into its parts; missing parts are empty."""
    resource, _, action = name.partition(":")
    return resource, action
