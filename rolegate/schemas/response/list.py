"""
List response schema for collections of objects.
"""

from typing import Generic, List, TypeVar

from pydantic import Field

from rolegate.schemas.metadata import BaseMetadata
from rolegate.schemas.response.base import BaseResponse

T = TypeVar("T")


class ListMetadata(BaseMetadata):
    """
    Metadata specific to list responses.

    Attributes:
        total: Total number of items
    """

    total: int = Field(default=0, description="Total number of items")


class ListResponse(BaseResponse[List[T], ListMetadata], Generic[T]):
    """
    Schema for list/collection API responses.

    Use ``ListResponse.of(items)`` to fill ``metadata.total`` from the items.
    """

    data: List[T] = Field(default_factory=list, description="List of items")
    metadata: ListMetadata = Field(
        default_factory=ListMetadata,
        description="Response metadata including the item count",
    )

    @classmethod
    def of(cls, items: List[T]) -> "ListResponse[T]":
        return cls(data=list(items), metadata=ListMetadata(total=len(items)))
