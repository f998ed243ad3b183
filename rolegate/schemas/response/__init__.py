"""
Response schemas for API endpoints.
"""

from rolegate.schemas.response.base import BaseResponse
from rolegate.schemas.response.data import DataResponse
from rolegate.schemas.response.error import ErrorInfo, ErrorResponse
from rolegate.schemas.response.list import ListMetadata, ListResponse

__all__ = [
    "BaseResponse",
    "DataResponse",
    "ErrorResponse",
    "ErrorInfo",
    "ListResponse",
    "ListMetadata",
]
