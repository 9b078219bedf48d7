"""Core infrastructure for the RentRoll backend."""

from .base_crud import BaseCRUD
from .exceptions import (
    AuthenticationError,
    ConflictError,
    InvalidStateError,
    NotFoundError,
    PermissionError,
    RentRollException,
    ValidationError,
)
from .pagination import calculate_offset, calculate_total_pages

__all__ = [
    "BaseCRUD",
    "RentRollException",
    "AuthenticationError",
    "PermissionError",
    "NotFoundError",
    "InvalidStateError",
    "ConflictError",
    "ValidationError",
    "calculate_offset",
    "calculate_total_pages",
]
