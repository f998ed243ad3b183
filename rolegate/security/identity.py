from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Identity(BaseModel):
    """
    The authenticated caller, as established by bearer token validation.

    ``email`` is the key the access guard uses to look the user up. The
    role claim is informational; authorization always reads the role
    from the stored user record.
    """

    model_config = ConfigDict(frozen=True)

    email: str = Field(..., description="Email claim identifying the user")
    role: Optional[str] = Field(default=None, description="Role claim, if any")
    token: Optional[str] = Field(
        default=None, description="The raw bearer token the identity came from"
    )
    expires_at: Optional[datetime] = Field(
        default=None, description="Expiry of the bearer token, if it has one"
    )
