"""Authentication dependencies for FastAPI."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ...core.exceptions import AuthenticationError, PermissionError
from .jwt_service import decode_access_token
from .models import UserRole
from .schemas import AuthenticatedUser

security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> AuthenticatedUser:
    """Resolve the principal from the bearer token.

    No database call is made; id and role come from the token.
    """
    if credentials is None:
        raise AuthenticationError("Missing bearer token")

    payload = decode_access_token(credentials.credentials)
    if payload is None:
        raise AuthenticationError("Invalid or expired token")

    try:
        return AuthenticatedUser(
            id=int(payload["sub"]),
            role=UserRole(payload["role"]),
            email=payload.get("email"),
        )
    except (KeyError, ValueError) as e:
        raise AuthenticationError(f"Invalid token payload: {e}") from e


def require_role(*allowed_roles: UserRole):
    """Dependency factory restricting an endpoint to the given roles.

    Usage:
        @router.post("")
        async def admin_endpoint(
            current_user: AuthenticatedUser = Depends(require_role(UserRole.ADMIN))
        ):
            ...
    """

    async def role_checker(
        current_user: Annotated[AuthenticatedUser, Depends(get_current_user)],
    ) -> AuthenticatedUser:
        if current_user.role not in allowed_roles:
            raise PermissionError(
                "access",
                "endpoint",
                reason=f"requires role {', '.join(r.value for r in allowed_roles)}",
            )
        return current_user

    return role_checker


# Type aliases for dependency injection
CurrentUser = Annotated[AuthenticatedUser, Depends(get_current_user)]
AdminPrincipal = Annotated[AuthenticatedUser, Depends(require_role(UserRole.ADMIN))]
ManagerPrincipal = Annotated[
    AuthenticatedUser, Depends(require_role(UserRole.ADMIN, UserRole.LANDLORD))
]
