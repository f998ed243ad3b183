from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from rolegate.authz import AuthorizationEngine, Permissions, get_authz, require_permissions
from rolegate.db import get_db
from rolegate.schemas import (
    DataResponse,
    ListResponse,
    PermissionCreate,
    PermissionRead,
    PermissionUpdate,
)

router = APIRouter(prefix="/permissions", tags=["permissions"])

can_read = Depends(require_permissions(Permissions.PERMISSIONS_READ))
can_write = Depends(require_permissions(Permissions.PERMISSIONS_WRITE))


@router.get("", response_model=ListResponse[PermissionRead], dependencies=[can_read])
async def list_permissions(
    session: AsyncSession = Depends(get_db),
    engine: AuthorizationEngine = Depends(get_authz),
):
    permissions = await engine.find_all_permissions(session)
    return ListResponse.of([PermissionRead.model_validate(p) for p in permissions])


@router.post(
    "",
    response_model=DataResponse[PermissionRead],
    status_code=201,
    dependencies=[can_write],
)
async def create_permission(
    payload: PermissionCreate,
    session: AsyncSession = Depends(get_db),
    engine: AuthorizationEngine = Depends(get_authz),
):
    permission = await engine.create_permission(session, payload.model_dump())
    return DataResponse(
        data=PermissionRead.model_validate(permission), message="Permission created"
    )


@router.get(
    "/{permission_id}",
    response_model=DataResponse[PermissionRead],
    dependencies=[can_read],
)
async def get_permission(
    permission_id: int,
    session: AsyncSession = Depends(get_db),
    engine: AuthorizationEngine = Depends(get_authz),
):
    permission = await engine.find_one_permission(session, permission_id)
    return DataResponse(data=PermissionRead.model_validate(permission))


@router.patch(
    "/{permission_id}",
    response_model=DataResponse[PermissionRead],
    dependencies=[can_write],
)
async def update_permission(
    permission_id: int,
    payload: PermissionUpdate,
    session: AsyncSession = Depends(get_db),
    engine: AuthorizationEngine = Depends(get_authz),
):
    permission = await engine.update_permission(
        session, permission_id, payload.model_dump(exclude_unset=True)
    )
    return DataResponse(
        data=PermissionRead.model_validate(permission), message="Permission updated"
    )


@router.delete(
    "/{permission_id}", response_model=DataResponse[dict], dependencies=[can_write]
)
async def delete_permission(
    permission_id: int,
    session: AsyncSession = Depends(get_db),
    engine: AuthorizationEngine = Depends(get_authz),
):
    await engine.remove_permission(session, permission_id)
    return DataResponse(data={"id": permission_id}, message="Permission deleted")
