"""CRUD operations for rent schedules and payments."""

from decimal import Decimal

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.base_crud import BaseCRUD
from .models import Payment, PaymentStatus, RentSchedule, RentStatus


class RentScheduleCRUD(BaseCRUD[RentSchedule]):
    default_relationships = ["property", "tenant"]
    default_order_by = "due_date"
    default_order_desc = False

    async def get_many(self, db: AsyncSession, ids: list[int]) -> list[RentSchedule]:
        """Load schedules by ID in due-date order."""
        if not ids:
            return []
        query = self._apply_relationships(
            select(RentSchedule).where(RentSchedule.id.in_(ids))
        )
        query = self._apply_ordering(query)
        result = await db.execute(query)
        return list(result.scalars().all())


class PaymentCRUD(BaseCRUD[Payment]):
    default_relationships = ["rent_schedule", "property", "tenant"]
    default_order_by = "payment_date"


rent_schedule_crud = RentScheduleCRUD(RentSchedule)
payment_crud = PaymentCRUD(Payment)


async def count_schedules_for_property(db: AsyncSession, property_id: int) -> int:
    return await rent_schedule_crud.count(db, property_id=property_id)


async def count_payments_for_schedule(db: AsyncSession, rent_schedule_id: int) -> int:
    return await payment_crud.count(db, rent_schedule_id=rent_schedule_id)


async def transaction_id_exists(db: AsyncSession, transaction_id: str) -> bool:
    return await payment_crud.exists(db, transaction_id=transaction_id)


# ----- Conditional status updates -----


def settlement_state_query(rent_schedule_id: int):
    """Locking read of a schedule's status and amount.

    ``FOR UPDATE`` reads the latest committed row rather than the
    transaction's snapshot and holds it until commit, so a retry after a
    failed compare-and-set sees the status that beat it.
    """
    return (
        select(RentSchedule.status, RentSchedule.amount)
        .where(RentSchedule.id == rent_schedule_id)
        .with_for_update()
    )


async def get_schedule_settlement_state(
    db: AsyncSession, rent_schedule_id: int
) -> tuple[RentStatus, Decimal] | None:
    """Read the schedule's current status and amount straight from the table."""
    result = await db.execute(settlement_state_query(rent_schedule_id))
    row = result.one_or_none()
    if row is None:
        return None
    return row.status, row.amount


async def set_schedule_status_if(
    db: AsyncSession,
    rent_schedule_id: int,
    expected: RentStatus,
    new: RentStatus,
) -> bool:
    """Set the schedule status only if it still equals ``expected``."""
    result = await db.execute(
        update(RentSchedule)
        .where(RentSchedule.id == rent_schedule_id, RentSchedule.status == expected)
        .values(status=new)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


async def set_payment_status_if(
    db: AsyncSession,
    payment_id: int,
    expected: PaymentStatus,
    new: PaymentStatus,
) -> bool:
    """Set the payment status only if it still equals ``expected``."""
    result = await db.execute(
        update(Payment)
        .where(Payment.id == payment_id, Payment.status == expected)
        .values(status=new)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1
