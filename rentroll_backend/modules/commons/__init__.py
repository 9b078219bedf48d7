"""Common schemas and utilities shared across modules."""

from .schemas import (
    BaseResponse,
    ErrorDetail,
    PaginatedResponse,
    PaginationParams,
)

__all__ = [
    "BaseResponse",
    "ErrorDetail",
    "PaginatedResponse",
    "PaginationParams",
]
