"""Tenant profile and property assignment services."""

from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession

from ...core.exceptions import NotFoundError
from ...core.logging import get_logger
from ..access.policy import (
    AccessTarget,
    Action,
    EntityKind,
    ScopeFilter,
    ensure_access,
    scope_filter,
)
from ..auth import crud as user_crud
from ..auth.models import TenantUser
from ..auth.schemas import AuthenticatedUser
from ..commons.schemas import PaginationParams
from ..property_management import occupancy
from ..property_management import services as property_services
from ..property_management.crud import property_crud
from ..property_management.models import Property
from .crud import tenant_profile_crud
from .schemas import TenantProfileUpdate

logger = get_logger(__name__)


def profile_target(tenant: TenantUser) -> AccessTarget:
    """Requires ``tenant.rented_properties`` to be loaded."""
    return AccessTarget.for_tenant_profile(
        tenant.id, {p.landlord_id for p in tenant.rented_properties}
    )


def visible_properties(
    principal: AuthenticatedUser, tenant: TenantUser
) -> list[Property]:
    """The tenant's current properties narrowed to what the caller may see."""
    scope = scope_filter(principal, EntityKind.PROPERTY)
    return [p for p in tenant.rented_properties if scope.matches(p)]


async def get_tenant_or_404(db: AsyncSession, tenant_id: int) -> TenantUser:
    tenant = await tenant_profile_crud.get(db, tenant_id)
    if tenant is None:
        raise NotFoundError("Tenant not found")
    return tenant


async def list_tenants(
    db: AsyncSession,
    principal: AuthenticatedUser,
    pagination: PaginationParams,
    search: str | None = None,
    has_property: bool | None = None,
) -> tuple[list[TenantUser], int]:
    """List tenant profiles visible to the principal.

    ``has_property`` keeps only tenants who currently occupy a property
    (true) or only those who occupy none (false).
    """
    conditions = []
    if has_property is not None:
        occupying = TenantUser.rented_properties.any()
        conditions.append(occupying if has_property else ~occupying)

    return await tenant_profile_crud.get_multi(
        db,
        pagination,
        scope=scope_filter(principal, EntityKind.TENANT_PROFILE),
        conditions=conditions,
        search_query=search,
    )


async def get_tenant(
    db: AsyncSession, principal: AuthenticatedUser, tenant_id: int
) -> TenantUser:
    tenant = await get_tenant_or_404(db, tenant_id)
    ensure_access(principal, Action.READ, profile_target(tenant))
    return tenant


async def update_tenant(
    db: AsyncSession,
    principal: AuthenticatedUser,
    tenant_id: int,
    data: TenantProfileUpdate,
) -> TenantUser:
    """Update a tenant profile.

    Raises:
        NotFoundError: If tenant not found
        PermissionError: If the principal may not edit this profile
    """
    tenant = await get_tenant_or_404(db, tenant_id)
    ensure_access(principal, Action.UPDATE, profile_target(tenant))

    await tenant_profile_crud.update(db, tenant, data)
    await db.commit()
    return await get_tenant_or_404(db, tenant_id)


async def list_tenant_properties(
    db: AsyncSession,
    principal: AuthenticatedUser,
    tenant_id: int,
    pagination: PaginationParams,
) -> tuple[list[Property], int]:
    """Properties the tenant currently occupies, scoped to the caller."""
    tenant = await get_tenant_or_404(db, tenant_id)
    ensure_access(principal, Action.READ, profile_target(tenant))

    scope = scope_filter(principal, EntityKind.PROPERTY).and_(
        ScopeFilter.where("current_tenant_id", tenant_id)
    )
    return await property_crud.get_multi(db, pagination, scope=scope)


async def assign_property(
    db: AsyncSession,
    principal: AuthenticatedUser,
    tenant_id: int,
    property_id: int,
    move_in_date: date | None = None,
    lease_end_date: date | None = None,
) -> Property:
    """Occupy an available property with a tenant.

    Raises:
        NotFoundError: If the tenant or the property does not exist
        PermissionError: If the principal does not own the property
        InvalidStateError: If the property is not available
    """
    tenant = await user_crud.get_tenant(db, tenant_id)
    if tenant is None:
        raise NotFoundError("Tenant not found")

    property_obj = await property_services.get_property_or_404(db, property_id)
    ensure_access(
        principal, Action.ASSIGN_TENANT, AccessTarget.for_property(property_obj)
    )

    change = occupancy.plan_assignment(
        property_obj, tenant_id, move_in_date, lease_end_date
    )
    await property_services.apply_occupancy_change(db, change)

    if move_in_date is not None:
        tenant.move_in_date = move_in_date
    if lease_end_date is not None:
        tenant.lease_end_date = lease_end_date

    await db.flush()
    await db.commit()

    logger.info(
        "Tenant assigned to property",
        extra={"tenant_id": tenant_id, "property_id": property_id},
    )
    return await property_services.get_property_or_404(db, property_id)


async def remove_property(
    db: AsyncSession,
    principal: AuthenticatedUser,
    tenant_id: int,
    property_id: int,
) -> Property:
    """Vacate a property the tenant currently occupies.

    Raises:
        NotFoundError: If the tenant or the property does not exist
        PermissionError: If the principal does not own the property
        InvalidStateError: If the tenant is not assigned to the property
    """
    tenant = await user_crud.get_tenant(db, tenant_id)
    if tenant is None:
        raise NotFoundError("Tenant not found")

    property_obj = await property_services.get_property_or_404(db, property_id)
    ensure_access(
        principal, Action.REMOVE_TENANT, AccessTarget.for_property(property_obj)
    )

    change = occupancy.plan_removal(property_obj, tenant_id)
    await property_services.apply_occupancy_change(db, change)
    await db.commit()

    logger.info(
        "Tenant removed from property",
        extra={"tenant_id": tenant_id, "property_id": property_id},
    )
    return await property_services.get_property_or_404(db, property_id)
