from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from rolegate.authz import AuthorizationEngine, Permissions, get_authz, require_permissions
from rolegate.db import get_db
from rolegate.schemas import (
    DataResponse,
    ListResponse,
    RoleCreate,
    RolePermissionRead,
    RoleRead,
    RoleUpdate,
    SetRolePermissions,
)

router = APIRouter(prefix="/roles", tags=["roles"])

can_read = Depends(require_permissions(Permissions.ROLES_READ))
can_write = Depends(require_permissions(Permissions.ROLES_WRITE))


@router.get("", response_model=ListResponse[RoleRead], dependencies=[can_read])
async def list_roles(
    session: AsyncSession = Depends(get_db),
    engine: AuthorizationEngine = Depends(get_authz),
):
    roles = await engine.find_all_roles(session)
    return ListResponse.of([RoleRead.model_validate(r) for r in roles])


@router.post(
    "", response_model=DataResponse[RoleRead], status_code=201, dependencies=[can_write]
)
async def create_role(
    payload: RoleCreate,
    session: AsyncSession = Depends(get_db),
    engine: AuthorizationEngine = Depends(get_authz),
):
    role = await engine.create_role(session, payload.model_dump())
    return DataResponse(data=RoleRead.model_validate(role), message="Role created")


@router.get("/{role_id}", response_model=DataResponse[RoleRead], dependencies=[can_read])
async def get_role(
    role_id: int,
    session: AsyncSession = Depends(get_db),
    engine: AuthorizationEngine = Depends(get_authz),
):
    role = await engine.find_one_role(session, role_id)
    return DataResponse(data=RoleRead.model_validate(role))


@router.patch(
    "/{role_id}", response_model=DataResponse[RoleRead], dependencies=[can_write]
)
async def update_role(
    role_id: int,
    payload: RoleUpdate,
    session: AsyncSession = Depends(get_db),
    engine: AuthorizationEngine = Depends(get_authz),
):
    role = await engine.update_role(
        session, role_id, payload.model_dump(exclude_unset=True)
    )
    return DataResponse(data=RoleRead.model_validate(role), message="Role updated")


@router.delete("/{role_id}", response_model=DataResponse[dict], dependencies=[can_write])
async def delete_role(
    role_id: int,
    session: AsyncSession = Depends(get_db),
    engine: AuthorizationEngine = Depends(get_authz),
):
    await engine.remove_role(session, role_id)
    return DataResponse(data={"id": role_id}, message="Role deleted")


@router.get(
    "/{role_id}/permissions",
    response_model=ListResponse[RolePermissionRead],
    dependencies=[can_read],
)
async def get_role_permissions(
    role_id: int,
    session: AsyncSession = Depends(get_db),
    engine: AuthorizationEngine = Depends(get_authz),
):
    links = await engine.get_role_permissions(session, role_id)
    return ListResponse.of([RolePermissionRead(**link) for link in links])


@router.patch(
    "/{role_id}/permissions",
    response_model=ListResponse[RolePermissionRead],
    dependencies=[can_write],
)
async def set_role_permissions(
    role_id: int,
    payload: SetRolePermissions,
    session: AsyncSession = Depends(get_db),
    engine: AuthorizationEngine = Depends(get_authz),
):
    links = await engine.set_role_permissions(session, role_id, payload.permission_ids)
    return ListResponse.of([RolePermissionRead(**link) for link in links])
