from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from rolegate.db import get_db
from rolegate.schemas import DataResponse
from rolegate.security import Identity, require_identity, revoke_token

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/logout", response_model=DataResponse[dict])
async def logout(
    identity: Identity = Depends(require_identity),
    session: AsyncSession = Depends(get_db),
):
    """Revoke the bearer token the request was made with."""
    if identity.token:
        await revoke_token(session, identity.token, expires_at=identity.expires_at)
    return DataResponse(data={}, message="Logged out successfully")


@router.get("/me", response_model=DataResponse[dict])
async def me(identity: Identity = Depends(require_identity)):
    return DataResponse(data={"email": identity.email})
