"""User management business logic."""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.exceptions import ConflictError, NotFoundError
from ...core.logging import get_logger
from . import crud
from .models import AdminUser, LandlordUser, TenantUser, User, UserRole
from .schemas import AdminCreate, AuthenticatedUser, LandlordCreate, TenantCreate

logger = get_logger(__name__)

_MODEL_BY_ROLE: dict[str, type[User]] = {
    UserRole.ADMIN.value: AdminUser,
    UserRole.LANDLORD.value: LandlordUser,
    UserRole.TENANT.value: TenantUser,
}


async def create_user(
    db: AsyncSession, data: AdminCreate | LandlordCreate | TenantCreate
) -> User:
    """Create a user of the requested role.

    Raises:
        ConflictError: If the email is already registered
    """
    if await crud.get_user_by_email(db, data.email):
        raise ConflictError(f"User with email '{data.email}' already exists")

    model = _MODEL_BY_ROLE[data.role]
    fields = data.model_dump(exclude={"role"})
    user = model(**fields)
    db.add(user)
    try:
        await db.flush()
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        raise ConflictError(f"User with email '{data.email}' already exists") from e

    logger.info("User created", extra={"user_id": user.id, "role": data.role})
    return await crud.user_crud.get(db, user.id)


async def get_profile(db: AsyncSession, principal: AuthenticatedUser) -> User:
    """Load the full record behind the current principal."""
    user = await crud.user_crud.get(db, principal.id)
    if user is None:
        raise NotFoundError("User not found")
    return user
