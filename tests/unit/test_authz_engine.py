"""
Unit tests for the authorization engine against an in-memory SQLite database.

Covers:
- Permission resolution (reserved role, unknown role, caching, invalidation)
- Permission and role CRUD with conflict, not-found and reserved-role rules
- Role-permission link replacement and cascade on permission deletion
- Idempotent, additive seeding
"""

import pytest
from sqlalchemy import func, select

from rolegate.authz import RESERVED_ROLE, AuthorizationEngine, Permissions, Roles
from rolegate.authz.cache import PermissionCache
from rolegate.authz.repositories import RolePermissionRepository
from rolegate.errors.exceptions import ConflictError, ForbiddenError, NotFoundError
from rolegate.models import Permission, Role, RolePermission


@pytest.fixture
def count_link_queries(monkeypatch):
    """Count calls to the link query used by resolution."""
    calls = []
    real_get_links = RolePermissionRepository.get_links

    async def counting(self, role_id):
        calls.append(role_id)
        return await real_get_links(self, role_id)

    monkeypatch.setattr(RolePermissionRepository, "get_links", counting)
    return calls


async def _count(session, model):
    result = await session.execute(select(func.count()).select_from(model))
    return result.scalar_one()


async def _role(session, authz, name):
    role = await authz.find_role_by_name(session, name)
    assert role is not None
    return role


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_unknown_role_resolves_to_empty_without_caching(seeded, authz):
    assert await authz.get_permissions_for_role(seeded, "ghost") == frozenset()
    assert "ghost" not in authz.cache


@pytest.mark.asyncio
async def test_reserved_role_sees_new_permission_without_invalidation(seeded, authz):
    before = await authz.get_permissions_for_role(seeded, RESERVED_ROLE)
    assert before == frozenset(Permissions.all())

    await authz.create_permission(seeded, {"name": "reports:read"})

    after = await authz.get_permissions_for_role(seeded, RESERVED_ROLE)
    assert after == before | {"reports:read"}
    assert RESERVED_ROLE not in authz.cache


@pytest.mark.asyncio
async def test_resolution_hits_link_query_once_within_ttl(
    seeded, authz, count_link_queries
):
    first = await authz.get_permissions_for_role(seeded, Roles.TEACHER)
    second = await authz.get_permissions_for_role(seeded, Roles.TEACHER)

    assert first == second == frozenset(
        {"words:read", "words:write", "tests:read", "tests:write"}
    )
    assert len(count_link_queries) == 1

    authz.invalidate_role_cache(Roles.TEACHER)
    await authz.get_permissions_for_role(seeded, Roles.TEACHER)
    assert len(count_link_queries) == 2


@pytest.mark.asyncio
async def test_resolution_recomputes_after_ttl(seeded, authz, clock, count_link_queries):
    await authz.get_permissions_for_role(seeded, Roles.STUDENT)
    clock.advance(301)
    await authz.get_permissions_for_role(seeded, Roles.STUDENT)
    assert len(count_link_queries) == 2



def test_injected_cache_is_used_even_when_empty(clock):
    cache = PermissionCache(ttl_seconds=5, clock=clock)
    engine = AuthorizationEngine(cache=cache)
    assert engine.cache is cache
    assert engine.cache.ttl_seconds == 5


@pytest.mark.asyncio
async def test_universal_flag_resolves_to_universe_without_caching(session, authz):
    await authz.create_permission(session, {"name": "words:read"})
    session.add(Role(name="root", is_universal=True))
    await session.commit()

    assert await authz.get_permissions_for_role(session, "root") == {"words:read"}
    assert "root" not in authz.cache


@pytest.mark.asyncio
async def test_role_without_links_caches_empty_set(seeded, authz):
    await authz.create_role(seeded, {"name": "guest"})
    assert await authz.get_permissions_for_role(seeded, "guest") == frozenset()
    assert authz.cache.get("guest") == frozenset()


def test_has_permission_is_exact_membership():
    held = frozenset({"words:read"})
    assert AuthorizationEngine.has_permission(held, "words:read")
    assert not AuthorizationEngine.has_permission(held, "words:write")
    assert not AuthorizationEngine.has_permission(held, "words")


# ---------------------------------------------------------------------------
# Permissions
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_duplicate_permission_conflicts_and_keeps_one(session, authz):
    await authz.create_permission(session, {"name": "words:read"})
    with pytest.raises(ConflictError):
        await authz.create_permission(session, {"name": "words:read"})

    result = await session.execute(
        select(func.count()).where(Permission.name == "words:read")
    )
    assert result.scalar_one() == 1


@pytest.mark.asyncio
async def test_find_all_permissions_sorted_by_name(session, authz):
    for name in ("zeta:read", "alpha:read", "mid:read"):
        await authz.create_permission(session, {"name": name})
    names = [p.name for p in await authz.find_all_permissions(session)]
    assert names == ["alpha:read", "mid:read", "zeta:read"]


@pytest.mark.asyncio
async def test_find_one_permission_not_found(session, authz):
    with pytest.raises(NotFoundError):
        await authz.find_one_permission(session, 999)


@pytest.mark.asyncio
async def test_update_permission_rename(session, authz):
    permission = await authz.create_permission(session, {"name": "old:read"})
    updated = await authz.update_permission(
        session, permission.id, {"name": "new:read", "description": "renamed"}
    )
    assert updated.name == "new:read"
    assert updated.description == "renamed"


@pytest.mark.asyncio
async def test_update_permission_to_own_name_is_allowed(session, authz):
    permission = await authz.create_permission(session, {"name": "same:read"})
    updated = await authz.update_permission(session, permission.id, {"name": "same:read"})
    assert updated.name == "same:read"


@pytest.mark.asyncio
async def test_update_permission_conflict(session, authz):
    await authz.create_permission(session, {"name": "a:read"})
    b = await authz.create_permission(session, {"name": "b:read"})
    with pytest.raises(ConflictError):
        await authz.update_permission(session, b.id, {"name": "a:read"})


@pytest.mark.asyncio
async def test_update_permission_not_found(session, authz):
    with pytest.raises(NotFoundError):
        await authz.update_permission(session, 404, {"description": "x"})


@pytest.mark.asyncio
async def test_rename_permission_invalidates_cached_sets(seeded, authz):
    await authz.get_permissions_for_role(seeded, Roles.STUDENT)
    permission = await seeded.scalar(
        select(Permission).where(Permission.name == "words:read")
    )

    await authz.update_permission(seeded, permission.id, {"name": "words:view"})

    assert await authz.get_permissions_for_role(seeded, Roles.STUDENT) == frozenset(
        {"words:view"}
    )


@pytest.mark.asyncio
async def test_delete_permission_linked_to_two_roles_removes_both_links(seeded, authz):
    permission = await seeded.scalar(
        select(Permission).where(Permission.name == "words:read")
    )
    teacher = await _role(seeded, authz, Roles.TEACHER)
    student = await _role(seeded, authz, Roles.STUDENT)
    await authz.get_permissions_for_role(seeded, Roles.TEACHER)

    await authz.remove_permission(seeded, permission.id)

    for role in (teacher, student):
        names = [link["name"] for link in await authz.get_role_permissions(seeded, role.id)]
        assert "words:read" not in names
    result = await seeded.execute(
        select(func.count()).where(RolePermission.permission_id == permission.id)
    )
    assert result.scalar_one() == 0
    assert "words:read" not in await authz.get_permissions_for_role(
        seeded, Roles.TEACHER
    )


@pytest.mark.asyncio
async def test_remove_permission_not_found(session, authz):
    with pytest.raises(NotFoundError):
        await authz.remove_permission(session, 12345)


# ---------------------------------------------------------------------------
# Roles
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_create_role_and_conflict(session, authz):
    role = await authz.create_role(session, {"name": "editor", "description": "Edits"})
    assert role.id is not None
    assert role.is_universal is False
    with pytest.raises(ConflictError):
        await authz.create_role(session, {"name": "editor"})


@pytest.mark.asyncio
async def test_find_all_roles_sorted_by_name(seeded, authz):
    names = [r.name for r in await authz.find_all_roles(seeded)]
    assert names == sorted(Roles.all())


@pytest.mark.asyncio
async def test_find_role_by_name_missing_returns_none(session, authz):
    assert await authz.find_role_by_name(session, "nobody") is None


@pytest.mark.asyncio
async def test_update_role_renames_and_invalidates_both_names(seeded, authz):
    editor = await authz.create_role(seeded, {"name": "editor"})
    await authz.get_permissions_for_role(seeded, "editor")
    await authz.get_permissions_for_role(seeded, "writer")

    updated = await authz.update_role(seeded, editor.id, {"name": "writer"})

    assert updated.name == "writer"
    assert "editor" not in authz.cache
    assert "writer" not in authz.cache
    assert await authz.get_permissions_for_role(seeded, "editor") == frozenset()


@pytest.mark.asyncio
async def test_update_role_conflict_and_not_found(seeded, authz):
    editor = await authz.create_role(seeded, {"name": "editor"})
    with pytest.raises(ConflictError):
        await authz.update_role(seeded, editor.id, {"name": Roles.TEACHER})
    with pytest.raises(NotFoundError):
        await authz.update_role(seeded, 999, {"name": "x"})


@pytest.mark.asyncio
async def test_remove_role_deletes_links(seeded, authz):
    teacher = await _role(seeded, authz, Roles.TEACHER)
    await authz.get_permissions_for_role(seeded, Roles.TEACHER)

    await authz.remove_role(seeded, teacher.id)

    assert await authz.find_role_by_name(seeded, Roles.TEACHER) is None
    result = await seeded.execute(
        select(func.count()).where(RolePermission.role_id == teacher.id)
    )
    assert result.scalar_one() == 0
    assert Roles.TEACHER not in authz.cache
    assert await authz.get_permissions_for_role(seeded, Roles.TEACHER) == frozenset()


@pytest.mark.asyncio
async def test_remove_role_not_found(session, authz):
    with pytest.raises(NotFoundError):
        await authz.remove_role(session, 999)


@pytest.mark.asyncio
async def test_reserved_role_mutations_are_forbidden(seeded, authz):
    reserved = await _role(seeded, authz, RESERVED_ROLE)
    editor = await authz.create_role(seeded, {"name": "editor"})
    permission_ids = [p.id for p in await authz.find_all_permissions(seeded)]
    roles_before = await _count(seeded, Role)
    links_before = await _count(seeded, RolePermission)

    with pytest.raises(ForbiddenError):
        await authz.create_role(seeded, {"name": RESERVED_ROLE})
    with pytest.raises(ForbiddenError):
        await authz.update_role(seeded, reserved.id, {"description": "changed"})
    with pytest.raises(ForbiddenError):
        await authz.update_role(seeded, editor.id, {"name": RESERVED_ROLE})
    with pytest.raises(ForbiddenError):
        await authz.remove_role(seeded, reserved.id)
    with pytest.raises(ForbiddenError):
        await authz.set_role_permissions(seeded, reserved.id, permission_ids)

    assert await _count(seeded, Role) == roles_before
    assert await _count(seeded, RolePermission) == links_before
    reserved = await _role(seeded, authz, RESERVED_ROLE)
    assert reserved.description is None
    assert (await authz.find_one_role(seeded, editor.id)).name == "editor"


# ---------------------------------------------------------------------------
# Role-permission links
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_set_role_permissions_replaces_links(seeded, authz):
    student = await _role(seeded, authz, Roles.STUDENT)
    tests_read = await seeded.scalar(
        select(Permission).where(Permission.name == "tests:read")
    )
    await authz.get_permissions_for_role(seeded, Roles.STUDENT)

    links = await authz.set_role_permissions(
        seeded, student.id, [tests_read.id, tests_read.id]
    )

    assert links == [{"permission_id": tests_read.id, "name": "tests:read"}]
    assert await authz.get_permissions_for_role(seeded, Roles.STUDENT) == frozenset(
        {"tests:read"}
    )


@pytest.mark.asyncio
async def test_set_role_permissions_empty_clears_links(seeded, authz):
    teacher = await _role(seeded, authz, Roles.TEACHER)

    assert await authz.set_role_permissions(seeded, teacher.id, []) == []
    assert await authz.get_role_permissions(seeded, teacher.id) == []
    assert await authz.get_permissions_for_role(seeded, Roles.TEACHER) == frozenset()


@pytest.mark.asyncio
async def test_set_role_permissions_unknown_id_leaves_links_unchanged(seeded, authz):
    teacher = await _role(seeded, authz, Roles.TEACHER)
    before = await authz.get_role_permissions(seeded, teacher.id)
    valid_id = before[0]["permission_id"]

    with pytest.raises(NotFoundError):
        await authz.set_role_permissions(seeded, teacher.id, [valid_id, 9999])

    assert await authz.get_role_permissions(seeded, teacher.id) == before


@pytest.mark.asyncio
async def test_set_role_permissions_role_not_found(seeded, authz):
    with pytest.raises(NotFoundError):
        await authz.set_role_permissions(seeded, 999, [])


@pytest.mark.asyncio
async def test_get_role_permissions_for_reserved_role_lists_everything(seeded, authz):
    reserved = await _role(seeded, authz, RESERVED_ROLE)
    links = await authz.get_role_permissions(seeded, reserved.id)
    assert [link["name"] for link in links] == sorted(Permissions.all())


@pytest.mark.asyncio
async def test_get_role_permissions_not_found(session, authz):
    with pytest.raises(NotFoundError):
        await authz.get_role_permissions(session, 999)


# ---------------------------------------------------------------------------
# Seeding
# ---------------------------------------------------------------------------


async def _snapshot(session):
    roles = (await session.execute(select(Role.name, Role.is_universal))).all()
    permissions = (await session.execute(select(Permission.name))).scalars().all()
    links = (
        await session.execute(select(RolePermission.role_id, RolePermission.permission_id))
    ).all()
    return sorted(roles), sorted(permissions), sorted(links)


@pytest.mark.asyncio
async def test_seed_creates_canonical_state(seeded, authz):
    roles, permissions, _ = await _snapshot(seeded)

    assert permissions == sorted(Permissions.all())
    assert dict(roles) == {
        Roles.ADMIN: False,
        Roles.STUDENT: False,
        Roles.SUPER_ADMIN: True,
        Roles.TEACHER: False,
    }
    reserved = await _role(seeded, authz, RESERVED_ROLE)
    result = await seeded.execute(
        select(func.count()).where(RolePermission.role_id == reserved.id)
    )
    assert result.scalar_one() == 0
    assert await authz.get_permissions_for_role(seeded, Roles.ADMIN) == frozenset(
        Permissions.all()
    )
    assert await authz.get_permissions_for_role(seeded, Roles.STUDENT) == frozenset(
        {"words:read"}
    )


@pytest.mark.asyncio
async def test_seed_is_idempotent(seeded, authz):
    once = await _snapshot(seeded)
    await authz.seed(seeded)
    assert await _snapshot(seeded) == once


@pytest.mark.asyncio
async def test_seed_is_additive(seeded, authz):
    student = await _role(seeded, authz, Roles.STUDENT)
    tests_read = await seeded.scalar(
        select(Permission).where(Permission.name == "tests:read")
    )
    await authz.set_role_permissions(seeded, student.id, [tests_read.id])
    custom = await authz.create_role(seeded, {"name": "editor"})

    await authz.seed(seeded)

    names = {link["name"] for link in await authz.get_role_permissions(seeded, student.id)}
    assert names == {"tests:read", "words:read"}
    assert await authz.find_one_role(seeded, custom.id)


@pytest.mark.asyncio
async def test_seed_clears_cache(seeded, authz):
    await authz.get_permissions_for_role(seeded, Roles.STUDENT)
    await authz.seed(seeded)
    assert len(authz.cache) == 0


@pytest.mark.asyncio
async def test_reserved_name_is_protected_without_universal_flag(session, authz):
    session.add(Role(name=RESERVED_ROLE, is_universal=False))
    await session.commit()
    reserved = await _role(session, authz, RESERVED_ROLE)

    with pytest.raises(ForbiddenError):
        await authz.update_role(session, reserved.id, {"description": "changed"})
    with pytest.raises(ForbiddenError):
        await authz.remove_role(session, reserved.id)
    with pytest.raises(ForbiddenError):
        await authz.set_role_permissions(session, reserved.id, [])


@pytest.mark.asyncio
async def test_seed_restores_universal_flag_on_reserved_role(session, authz):
    session.add(Role(name=RESERVED_ROLE, is_universal=False))
    await session.commit()

    await authz.seed(session)

    reserved = await _role(session, authz, RESERVED_ROLE)
    assert reserved.is_universal is True
