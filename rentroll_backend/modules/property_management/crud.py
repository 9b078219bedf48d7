"""CRUD operations for property management module."""

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.base_crud import BaseCRUD
from .models import MaintenanceRecord, Property
from .occupancy import OccupancyChange


class PropertyCRUD(BaseCRUD[Property]):
    search_fields = ["name", "street", "city"]
    default_relationships = ["landlord", "current_tenant", "maintenance_records"]


property_crud = PropertyCRUD(Property)


# ----- Occupancy -----


async def apply_occupancy_change(db: AsyncSession, change: OccupancyChange) -> bool:
    """Apply a planned transition as a single conditional UPDATE.

    Returns:
        False if the row no longer matches the observed status and tenant
    """
    if change.expected_tenant_id is None:
        tenant_guard = Property.current_tenant_id.is_(None)
    else:
        tenant_guard = Property.current_tenant_id == change.expected_tenant_id

    stmt = (
        update(Property)
        .where(
            Property.id == change.property_id,
            Property.status == change.expected_status,
            tenant_guard,
        )
        .values(**change.values)
        .execution_options(synchronize_session=False)
    )
    result = await db.execute(stmt)
    return result.rowcount == 1


# ----- Maintenance Record CRUD -----


async def get_maintenance_record(
    db: AsyncSession, property_id: int, record_id: int
) -> MaintenanceRecord | None:
    """Get a maintenance record belonging to the given property."""
    result = await db.execute(
        select(MaintenanceRecord).where(
            MaintenanceRecord.id == record_id,
            MaintenanceRecord.property_id == property_id,
        )
    )
    return result.scalar_one_or_none()


async def create_maintenance_record(
    db: AsyncSession,
    property_id: int,
    issue: str,
    description: str | None,
    reported_by_id: int,
) -> MaintenanceRecord:
    """Append a maintenance record to a property."""
    record = MaintenanceRecord(
        property_id=property_id,
        issue=issue,
        description=description,
        reported_by_id=reported_by_id,
    )
    db.add(record)
    await db.flush()
    return record
