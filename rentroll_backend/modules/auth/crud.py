"""CRUD operations for users."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.base_crud import BaseCRUD
from .models import LandlordUser, TenantUser, User


class UserCRUD(BaseCRUD[User]):
    search_fields = ["email", "first_name", "last_name"]


user_crud = UserCRUD(User)


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    """Get a user of any role by email."""
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def get_tenant(db: AsyncSession, tenant_id: int) -> TenantUser | None:
    """Get a user by ID only if it holds the tenant role."""
    result = await db.execute(
        select(TenantUser)
        .where(TenantUser.id == tenant_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_landlord(db: AsyncSession, landlord_id: int) -> LandlordUser | None:
    """Get a user by ID only if it holds the landlord role."""
    result = await db.execute(
        select(LandlordUser).where(LandlordUser.id == landlord_id)
    )
    return result.scalar_one_or_none()
