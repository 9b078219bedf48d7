"""
Custom exception classes for consistent error handling across all modules.

Every domain failure carries a ``kind`` (the stable, transport-independent
failure category) and the HTTP ``status_code`` the API maps it to.
"""

from typing import Any


class RentRollException(Exception):
    """Base exception for all RentRoll related errors."""

    kind = "internal_error"
    status_code = 400

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def to_error(self) -> dict[str, Any]:
        """Structured failure payload (kind + human-readable message)."""
        return {"kind": self.kind, "message": self.message, "details": self.details}


class AuthenticationError(RentRollException):
    """Raised when no valid principal accompanies a request."""

    kind = "unauthorized"
    status_code = 401

    def __init__(
        self,
        message: str = "Authentication required",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, details)


class PermissionError(RentRollException):
    """Raised when user lacks permission to perform an action."""

    kind = "forbidden"
    status_code = 403

    def __init__(
        self,
        action: str,
        resource_type: str,
        reason: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        message = f"Permission denied: cannot {action} {resource_type}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message, details)
        self.action = action
        self.resource_type = resource_type
        self.reason = reason


class NotFoundError(RentRollException):
    """Raised when a requested record does not exist."""

    kind = "not_found"
    status_code = 404

    def __init__(
        self, message: str = "Resource not found", details: dict[str, Any] | None = None
    ):
        super().__init__(message, details)


class InvalidStateError(RentRollException):
    """Raised when an action violates an entity's current state."""

    kind = "invalid_state"
    status_code = 409


class ConflictError(RentRollException):
    """Raised on uniqueness violations."""

    kind = "conflict"
    status_code = 409


class ValidationError(RentRollException):
    """Raised when a domain-level constraint is violated."""

    kind = "validation_failed"
    status_code = 422

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
        details: dict[str, Any] | None = None,
    ):
        if field:
            full_message = f"Validation error for field '{field}': {message}"
        else:
            full_message = message
        super().__init__(full_message, details)
        self.field = field
        self.value = value

