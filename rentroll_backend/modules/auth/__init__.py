"""Users, principals and bearer-token authentication."""

from .dependencies import (
    AdminPrincipal,
    CurrentUser,
    ManagerPrincipal,
    get_current_user,
    require_role,
)
from .models import AdminUser, LandlordUser, TenantUser, User, UserRole
from .schemas import AuthenticatedUser, UserSummary

__all__ = [
    # Models
    "User",
    "AdminUser",
    "LandlordUser",
    "TenantUser",
    "UserRole",
    # Dependencies
    "get_current_user",
    "require_role",
    "CurrentUser",
    "AdminPrincipal",
    "ManagerPrincipal",
    # Schemas
    "AuthenticatedUser",
    "UserSummary",
]
