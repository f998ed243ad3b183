"""
Unit tests for the access guard.

Covers:
- Empty requirement allows without lookups
- Missing identity or subject is rejected before the engine is touched
- Unknown users, OR semantics and insufficient permissions
- Email claims match stored users regardless of case
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from rolegate.authz import Roles, authorize
from rolegate.errors.exceptions import ForbiddenError
from rolegate.security import Identity


@pytest.fixture
def engine_mock():
    engine = MagicMock()
    engine.get_permissions_for_role = AsyncMock(return_value=frozenset({"b"}))
    engine.has_permission = lambda held, name: name in held
    return engine


@pytest.mark.asyncio
@pytest.mark.parametrize("required", [[], None, ()])
async def test_empty_requirement_allows_without_lookup(
    engine_mock, dummy_session, required
):
    assert await authorize(engine_mock, dummy_session, None, required) is True
    engine_mock.get_permissions_for_role.assert_not_awaited()
    dummy_session.execute.assert_not_awaited()


@pytest.mark.asyncio
@pytest.mark.parametrize("identity", [None, Identity(email="")])
async def test_missing_subject_is_forbidden(engine_mock, dummy_session, identity):
    with pytest.raises(ForbiddenError) as exc:
        await authorize(engine_mock, dummy_session, identity, ["a"])
    assert exc.value.message == "Not authenticated"
    engine_mock.get_permissions_for_role.assert_not_awaited()
    dummy_session.execute.assert_not_awaited()


@pytest.mark.asyncio
async def test_unknown_user_is_forbidden(seeded, authz):
    with pytest.raises(ForbiddenError) as exc:
        await authorize(authz, seeded, Identity(email="nobody@example.com"), ["a"])
    assert exc.value.message == "User not found"


@pytest.mark.asyncio
async def test_any_of_required_permissions_grants(seeded, engine_mock, users):
    await users.create(
        seeded,
        {
            "first_name": "T",
            "last_name": "U",
            "email": "t@example.com",
            "role": Roles.TEACHER,
        },
    )
    identity = Identity(email="t@example.com")
    assert await authorize(engine_mock, seeded, identity, ["a", "b"]) is True
    engine_mock.get_permissions_for_role.assert_awaited_once_with(
        seeded, Roles.TEACHER
    )


@pytest.mark.asyncio
async def test_insufficient_permissions_message_hides_requirement(
    seeded, authz, users
):
    await users.create(
        seeded,
        {
            "first_name": "S",
            "last_name": "U",
            "email": "s@example.com",
            "role": Roles.STUDENT,
        },
    )
    with pytest.raises(ForbiddenError) as exc:
        await authorize(authz, seeded, Identity(email="s@example.com"), ["users:write"])
    assert exc.value.message == "Insufficient permissions"
    assert "users:write" not in exc.value.message


@pytest.mark.asyncio
async def test_role_from_user_record_not_from_claim(seeded, authz, users):
    await users.create(
        seeded,
        {
            "first_name": "S",
            "last_name": "U",
            "email": "s@example.com",
            "role": Roles.STUDENT,
        },
    )
    identity = Identity(email="s@example.com", role=Roles.ADMIN)
    with pytest.raises(ForbiddenError):
        await authorize(authz, seeded, identity, ["users:read"])
    assert await authorize(authz, seeded, identity, ["words:read"]) is True


@pytest.mark.asyncio
async def test_reserved_user_holds_everything(seeded, authz, users):
    await users.seed_default_user(seeded, "admin@example.com")
    await authz.create_permission(seeded, {"name": "reports:read"})
    identity = Identity(email="admin@example.com")
    assert await authorize(authz, seeded, identity, ["reports:read"]) is True


@pytest.mark.asyncio
async def test_mixed_case_email_claim_finds_user(seeded, authz, users):
    await users.create(
        seeded,
        {
            "first_name": "A",
            "last_name": "L",
            "email": "alice@example.com",
            "role": Roles.ADMIN,
        },
    )
    identity = Identity(email="Alice@Example.com")
    assert await authorize(authz, seeded, identity, ["users:read"]) is True
