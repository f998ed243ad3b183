"""
Base response schema shared by the data, list and error envelopes.
"""

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, Field

from rolegate.schemas.metadata import BaseMetadata

T = TypeVar("T")
M = TypeVar("M", bound=BaseMetadata)


class BaseResponse(BaseModel, Generic[T, M]):
    """
    Base schema for all API responses.

    Standardized envelope with success, data, metadata and message fields.
    """

    success: bool = Field(
        default=True, description="Indicates if the request was successful"
    )
    data: Optional[T] = Field(default=None, description="Response payload")
    metadata: M
    message: Optional[str] = Field(
        default=None, description="Additional context about the response"
    )
