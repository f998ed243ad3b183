"""
Data response schema for single-object responses.
"""

from typing import Generic, TypeVar

from pydantic import Field

from rolegate.schemas.metadata import ResponseMetadata
from rolegate.schemas.response.base import BaseResponse

T = TypeVar("T")


class DataResponse(BaseResponse[T, ResponseMetadata], Generic[T]):
    """
    Schema for single-object API responses.

    Attributes:
        data: The response payload (required)
        metadata: Standard response metadata
        success: Whether the request was successful
        message: Optional message providing additional context
    """

    data: T = Field(..., description="Response payload (required)")
    metadata: ResponseMetadata = Field(
        default_factory=ResponseMetadata, description="Standard response metadata"
    )
