from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from rolegate.api.dependencies import get_user_service
from rolegate.authz import Permissions, require_permissions
from rolegate.db import get_db
from rolegate.schemas import DataResponse, ListResponse, UserCreate, UserRead, UserUpdate
from rolegate.users import UserService

router = APIRouter(prefix="/users", tags=["users"])

can_read = Depends(require_permissions(Permissions.USERS_READ))
can_write = Depends(require_permissions(Permissions.USERS_WRITE))


@router.get("", response_model=ListResponse[UserRead], dependencies=[can_read])
async def list_users(
    session: AsyncSession = Depends(get_db),
    service: UserService = Depends(get_user_service),
):
    users = await service.find_all(session)
    return ListResponse.of([UserRead.model_validate(u) for u in users])


@router.post(
    "", response_model=DataResponse[UserRead], status_code=201, dependencies=[can_write]
)
async def create_user(
    payload: UserCreate,
    session: AsyncSession = Depends(get_db),
    service: UserService = Depends(get_user_service),
):
    user = await service.create(session, payload.model_dump())
    return DataResponse(data=UserRead.model_validate(user), message="User created")


@router.get("/{user_id}", response_model=DataResponse[UserRead], dependencies=[can_read])
async def get_user(
    user_id: int,
    session: AsyncSession = Depends(get_db),
    service: UserService = Depends(get_user_service),
):
    user = await service.find_one(session, user_id)
    return DataResponse(data=UserRead.model_validate(user))


@router.patch(
    "/{user_id}", response_model=DataResponse[UserRead], dependencies=[can_write]
)
async def update_user(
    user_id: int,
    payload: UserUpdate,
    session: AsyncSession = Depends(get_db),
    service: UserService = Depends(get_user_service),
):
    user = await service.update(session, user_id, payload.model_dump(exclude_unset=True))
    return DataResponse(data=UserRead.model_validate(user), message="User updated")


@router.delete("/{user_id}", response_model=DataResponse[dict], dependencies=[can_write])
async def delete_user(
    user_id: int,
    session: AsyncSession = Depends(get_db),
    service: UserService = Depends(get_user_service),
):
    await service.remove(session, user_id)
    return DataResponse(data={"id": user_id}, message="User deleted")
