"""Property management business logic services."""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from ...core.exceptions import (
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from ...core.logging import get_logger
from ...core.utils import utc_now
from ..access.policy import (
    AccessTarget,
    Action,
    EntityKind,
    ensure_access,
    scope_filter,
)
from ..auth import crud as user_crud
from ..auth.models import UserRole
from ..auth.schemas import AuthenticatedUser
from ..commons.schemas import PaginationParams
from ..rent_management.crud import count_schedules_for_property
from . import crud, occupancy
from .models import MaintenanceRecord, MaintenanceStatus, Property
from .schemas import (
    MaintenanceCreate,
    MaintenanceUpdate,
    PropertyCreate,
    PropertyFilters,
    PropertyUpdate,
)

logger = get_logger(__name__)


async def get_property_or_404(db: AsyncSession, property_id: int) -> Property:
    property_obj = await crud.property_crud.get(db, property_id)
    if property_obj is None:
        raise NotFoundError(f"Property with ID {property_id} not found")
    return property_obj


async def apply_occupancy_change(
    db: AsyncSession, change: occupancy.OccupancyChange
) -> None:
    """Persist a planned transition or fail if the row moved underneath us.

    Raises:
        InvalidStateError: If another writer changed status or tenant first
    """
    status = change.values.get("status", change.expected_status)
    tenant_id = change.values.get("current_tenant_id", change.expected_tenant_id)
    if not occupancy.satisfies_invariant(status, tenant_id):
        raise InvalidStateError(
            "Property status must be occupied exactly when a tenant is assigned",
            details={"property_id": change.property_id, "transition": change.name},
        )

    applied = await crud.apply_occupancy_change(db, change)
    if not applied:
        await db.rollback()
        raise InvalidStateError(
            "Property state changed concurrently, transition rejected",
            details={"property_id": change.property_id, "transition": change.name},
        )
    logger.info(
        "Occupancy transition applied",
        extra={
            "property_id": change.property_id,
            "transition": change.name,
            "from_status": change.expected_status.value,
            "to_status": change.values.get("status", change.expected_status).value,
        },
    )


async def list_properties(
    db: AsyncSession,
    principal: AuthenticatedUser,
    pagination: PaginationParams,
    filters: PropertyFilters,
) -> tuple[list[Property], int]:
    """List the properties visible to the principal."""
    conditions = []
    if filters.city:
        conditions.append(Property.city.ilike(f"%{filters.city}%"))
    if filters.state:
        conditions.append(Property.state.ilike(f"%{filters.state}%"))
    if filters.min_rent is not None:
        conditions.append(Property.monthly_rent >= filters.min_rent)
    if filters.max_rent is not None:
        conditions.append(Property.monthly_rent <= filters.max_rent)

    return await crud.property_crud.get_multi(
        db,
        pagination,
        scope=scope_filter(principal, EntityKind.PROPERTY),
        filters={"status": filters.status, "property_type": filters.property_type},
        conditions=conditions,
        search_query=filters.search,
    )


async def get_property(
    db: AsyncSession, principal: AuthenticatedUser, property_id: int
) -> Property:
    property_obj = await get_property_or_404(db, property_id)
    ensure_access(principal, Action.READ, AccessTarget.for_property(property_obj))
    return property_obj


async def create_property(
    db: AsyncSession, principal: AuthenticatedUser, data: PropertyCreate
) -> Property:
    """Create a property owned by a landlord.

    Raises:
        PermissionError: Tenants, or a landlord naming another landlord
        ValidationError: Admin without a landlord_id
        NotFoundError: If landlord_id does not resolve to a landlord
    """
    landlord_id = data.landlord_id
    if principal.role == UserRole.LANDLORD and landlord_id is None:
        landlord_id = principal.id

    ensure_access(principal, Action.CREATE, AccessTarget.for_new_property(landlord_id))

    if landlord_id is None:
        raise ValidationError("A landlord must be specified", field="landlord_id")
    if await user_crud.get_landlord(db, landlord_id) is None:
        raise NotFoundError(f"Landlord with ID {landlord_id} not found")

    status = occupancy.initial_status(data.status)

    fields = data.model_dump(exclude={"landlord_id", "status"})
    property_obj = await crud.property_crud.create(
        db, fields, landlord_id=landlord_id, status=status
    )
    await db.commit()

    logger.info(
        "Property created",
        extra={"property_id": property_obj.id, "landlord_id": landlord_id},
    )
    return await get_property_or_404(db, property_obj.id)


async def update_property(
    db: AsyncSession,
    principal: AuthenticatedUser,
    property_id: int,
    data: PropertyUpdate,
) -> Property:
    """Update property fields; status edits go through the state machine.

    Raises:
        NotFoundError: If property not found
        PermissionError: If the principal may not edit this property
        InvalidStateError: If the status edit would break occupancy rules
    """
    property_obj = await get_property_or_404(db, property_id)
    ensure_access(principal, Action.UPDATE, AccessTarget.for_property(property_obj))

    update_data: dict[str, Any] = data.model_dump(exclude_unset=True)
    status_change = occupancy.plan_status_edit(
        property_obj, update_data.pop("status", None)
    )

    if status_change is not None:
        await apply_occupancy_change(db, status_change)

    if update_data:
        await crud.property_crud.update(db, property_obj, update_data)

    await db.commit()
    return await get_property_or_404(db, property_id)


async def delete_property(
    db: AsyncSession, principal: AuthenticatedUser, property_id: int
) -> None:
    """Delete a vacant property that has no rent schedules.

    Raises:
        NotFoundError: If property not found
        PermissionError: If the principal may not delete this property
        InvalidStateError: If the property is occupied or has rent schedules
    """
    property_obj = await get_property_or_404(db, property_id)
    ensure_access(principal, Action.DELETE, AccessTarget.for_property(property_obj))

    if property_obj.current_tenant_id is not None:
        raise InvalidStateError(
            "Cannot delete an occupied property. Remove the tenant first.",
            details={"property_id": property_id},
        )

    schedule_count = await count_schedules_for_property(db, property_id)
    if schedule_count > 0:
        raise InvalidStateError(
            f"Cannot delete property with {schedule_count} rent schedule(s)",
            details={"property_id": property_id},
        )

    await crud.property_crud.delete(db, property_obj)
    await db.commit()
    logger.info("Property deleted", extra={"property_id": property_id})


# ----- Maintenance -----


async def report_maintenance(
    db: AsyncSession,
    principal: AuthenticatedUser,
    property_id: int,
    data: MaintenanceCreate,
) -> MaintenanceRecord:
    """Append a maintenance request to a property's history."""
    property_obj = await get_property_or_404(db, property_id)
    ensure_access(
        principal, Action.REPORT_MAINTENANCE, AccessTarget.for_property(property_obj)
    )

    record = await crud.create_maintenance_record(
        db,
        property_id=property_id,
        issue=data.issue,
        description=data.description,
        reported_by_id=principal.id,
    )
    await db.commit()
    await db.refresh(record)

    logger.info(
        "Maintenance request reported",
        extra={"property_id": property_id, "record_id": record.id},
    )
    return record


async def update_maintenance(
    db: AsyncSession,
    principal: AuthenticatedUser,
    property_id: int,
    record_id: int,
    data: MaintenanceUpdate,
) -> MaintenanceRecord:
    """Move a maintenance record along pending -> in-progress -> completed."""
    property_obj = await get_property_or_404(db, property_id)
    ensure_access(
        principal, Action.UPDATE_MAINTENANCE, AccessTarget.for_property(property_obj)
    )

    record = await crud.get_maintenance_record(db, property_id, record_id)
    if record is None:
        raise NotFoundError(f"Maintenance record with ID {record_id} not found")

    if record.status == MaintenanceStatus.COMPLETED and (
        data.status != MaintenanceStatus.COMPLETED
    ):
        raise InvalidStateError(
            "Completed maintenance records cannot be reopened",
            details={"record_id": record_id},
        )

    record.status = data.status
    if data.cost is not None:
        record.cost = data.cost
    if data.status == MaintenanceStatus.COMPLETED and record.completed_at is None:
        record.completed_at = utc_now()

    await db.flush()
    await db.commit()
    await db.refresh(record)
    return record
