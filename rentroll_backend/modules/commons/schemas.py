"""Response envelope and paging schemas shared by every module."""

from datetime import datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

from ...core.pagination import calculate_offset, calculate_total_pages
from ...core.utils import utc_now

T = TypeVar("T")


class ErrorDetail(BaseModel):
    """Failure category plus a human-readable message."""

    kind: str = Field(description="Stable failure category, e.g. not_found")
    message: str
    details: dict[str, Any] = Field(default_factory=dict)


class BaseResponse(BaseModel, Generic[T]):
    """Envelope around every API payload.

    Successful calls carry ``data``; failures carry ``error`` and null data.
    """

    success: bool = True
    message: str | None = None
    data: T | None = None
    error: ErrorDetail | None = None
    timestamp: datetime = Field(default_factory=utc_now)


class PaginationParams(BaseModel):
    """1-based page number and page size from list query strings."""

    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=20, ge=1, le=100)

    @property
    def offset(self) -> int:
        return calculate_offset(self.page, self.page_size)


class PaginatedResponse(BaseModel, Generic[T]):
    """One page of a scoped list plus the scoped total."""

    items: list[T] = Field(default_factory=list)
    total: int = Field(default=0, description="Matching records across all pages")
    page: int = 1
    page_size: int = 20
    total_pages: int = 0

    @classmethod
    def from_items(cls, items: list[T], total: int, page: int, page_size: int):
        return cls(
            items=items,
            total=total,
            page=page,
            page_size=page_size,
            total_pages=calculate_total_pages(total, page_size),
        )
