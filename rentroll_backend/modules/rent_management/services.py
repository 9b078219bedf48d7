"""Rent schedule and payment business logic services."""

from decimal import Decimal

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ...config import settings
from ...core.exceptions import (
    ConflictError,
    InvalidStateError,
    NotFoundError,
    PermissionError,
    ValidationError,
)
from ...core.logging import get_logger
from ...core.utils import generate_transaction_id, utc_now
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
from ..property_management.crud import property_crud
from ..property_management.models import Property
from . import crud, generator, settlement
from .models import Payment, PaymentStatus, RentSchedule
from .schemas import (
    BulkRentScheduleCreate,
    PaymentCreate,
    PaymentFilters,
    RentScheduleCreate,
    RentScheduleFilters,
    RentScheduleUpdate,
)

logger = get_logger(__name__)

# Fields a tenant may change on their own schedules
TENANT_EDITABLE_FIELDS = frozenset({"notes", "payment_method"})

# Upper bound on re-reads when the schedule status keeps moving under us
MAX_SETTLEMENT_ATTEMPTS = 10


def _ensure_non_negative(field: str, value: Decimal | None) -> None:
    if value is not None and value < 0:
        raise ValidationError("must not be negative", field=field, value=str(value))


async def _get_schedule_or_404(db: AsyncSession, schedule_id: int) -> RentSchedule:
    schedule = await crud.rent_schedule_crud.get(db, schedule_id)
    if schedule is None:
        raise NotFoundError("Rent schedule not found")
    return schedule


async def _get_payment_or_404(db: AsyncSession, payment_id: int) -> Payment:
    payment = await crud.payment_crud.get(db, payment_id)
    if payment is None:
        raise NotFoundError("Payment not found")
    return payment


async def _get_property_for_schedule(
    db: AsyncSession, principal: AuthenticatedUser, property_id: int, tenant_id: int
) -> Property:
    """Load the target property and check the principal may schedule rent on it."""
    property_obj = await property_crud.get(db, property_id, load_relationships=[])
    if property_obj is None:
        raise NotFoundError("Property not found")

    ensure_access(
        principal,
        Action.CREATE,
        AccessTarget.for_new_rent_schedule(property_obj, tenant_id),
    )

    if await user_crud.get_tenant(db, tenant_id) is None:
        raise NotFoundError("Tenant not found")
    return property_obj


# ----- Rent Schedules -----


async def list_schedules(
    db: AsyncSession,
    principal: AuthenticatedUser,
    pagination: PaginationParams,
    filters: RentScheduleFilters,
) -> tuple[list[RentSchedule], int]:
    """List rent schedules visible to the principal.

    The tenant filter only applies to admins; others are already narrowed.
    """
    conditions = []
    if filters.due_date_from is not None:
        conditions.append(RentSchedule.due_date >= filters.due_date_from)
    if filters.due_date_to is not None:
        conditions.append(RentSchedule.due_date <= filters.due_date_to)

    tenant_id = filters.tenant_id if principal.role == UserRole.ADMIN else None

    return await crud.rent_schedule_crud.get_multi(
        db,
        pagination,
        scope=scope_filter(principal, EntityKind.RENT_SCHEDULE),
        filters={
            "status": filters.status,
            "property_id": filters.property_id,
            "tenant_id": tenant_id,
        },
        conditions=conditions,
    )


async def get_schedule(
    db: AsyncSession, principal: AuthenticatedUser, schedule_id: int
) -> RentSchedule:
    schedule = await _get_schedule_or_404(db, schedule_id)
    ensure_access(principal, Action.READ, AccessTarget.for_rent_schedule(schedule))
    return schedule


async def create_schedule(
    db: AsyncSession, principal: AuthenticatedUser, data: RentScheduleCreate
) -> RentSchedule:
    """Create a single rent schedule.

    Raises:
        NotFoundError: If the property or tenant does not exist
        PermissionError: If the principal does not own the property
        ValidationError: On a negative amount or late fee
    """
    await _get_property_for_schedule(db, principal, data.property_id, data.tenant_id)
    _ensure_non_negative("amount", data.amount)
    _ensure_non_negative("late_fee", data.late_fee)

    schedule = await crud.rent_schedule_crud.create(db, data)
    await db.commit()

    logger.info(
        "Rent schedule created",
        extra={"rent_schedule_id": schedule.id, "property_id": data.property_id},
    )
    return await _get_schedule_or_404(db, schedule.id)


async def bulk_create_schedules(
    db: AsyncSession, principal: AuthenticatedUser, data: BulkRentScheduleCreate
) -> list[RentSchedule]:
    """Generate recurring schedules between two dates.

    A start date after the end date yields an empty batch.
    """
    await _get_property_for_schedule(db, principal, data.property_id, data.tenant_id)
    _ensure_non_negative("amount", data.amount)

    rows = generator.generate_schedules(
        property_id=data.property_id,
        tenant_id=data.tenant_id,
        amount=data.amount,
        start_date=data.start_date,
        end_date=data.end_date,
        frequency=data.frequency,
        payment_method=data.payment_method,
        limit=settings.max_bulk_schedules,
    )
    if not rows:
        return []

    created = await crud.rent_schedule_crud.create_many(db, rows)
    ids = [schedule.id for schedule in created]
    await db.commit()

    logger.info(
        "Rent schedules generated",
        extra={
            "property_id": data.property_id,
            "tenant_id": data.tenant_id,
            "frequency": data.frequency.value,
            "count": len(ids),
        },
    )
    return await crud.rent_schedule_crud.get_many(db, ids)


async def update_schedule(
    db: AsyncSession,
    principal: AuthenticatedUser,
    schedule_id: int,
    data: RentScheduleUpdate,
) -> RentSchedule:
    """Update a rent schedule.

    Tenants may only change ``notes`` and ``payment_method`` of their own
    schedules.

    Raises:
        NotFoundError: If the schedule does not exist
        PermissionError: If the principal may not make this change
        ValidationError: On a negative amount or late fee
    """
    schedule = await _get_schedule_or_404(db, schedule_id)
    ensure_access(principal, Action.UPDATE, AccessTarget.for_rent_schedule(schedule))

    update_data = data.model_dump(exclude_unset=True)
    if principal.role == UserRole.TENANT:
        restricted = sorted(set(update_data) - TENANT_EDITABLE_FIELDS)
        if restricted:
            raise PermissionError(
                "update",
                "rent schedule",
                reason=f"tenants may not change {', '.join(restricted)}",
            )

    for field in ("amount", "late_fee"):
        if field in update_data:
            _ensure_non_negative(field, update_data[field])

    await crud.rent_schedule_crud.update(db, schedule, update_data)
    await db.commit()
    return await _get_schedule_or_404(db, schedule_id)


async def delete_schedule(
    db: AsyncSession, principal: AuthenticatedUser, schedule_id: int
) -> None:
    """Delete a rent schedule that has no payments recorded against it."""
    schedule = await _get_schedule_or_404(db, schedule_id)
    ensure_access(principal, Action.DELETE, AccessTarget.for_rent_schedule(schedule))

    payment_count = await crud.count_payments_for_schedule(db, schedule_id)
    if payment_count > 0:
        raise InvalidStateError(
            f"Cannot delete rent schedule with {payment_count} payment(s)",
            details={"rent_schedule_id": schedule_id},
        )

    await crud.rent_schedule_crud.delete(db, schedule)
    await db.commit()
    logger.info("Rent schedule deleted", extra={"rent_schedule_id": schedule_id})


# ----- Payments -----


async def list_payments(
    db: AsyncSession,
    principal: AuthenticatedUser,
    pagination: PaginationParams,
    filters: PaymentFilters,
) -> tuple[list[Payment], int]:
    """List payments visible to the principal."""
    conditions = []
    if filters.payment_date_from is not None:
        conditions.append(Payment.payment_date >= filters.payment_date_from)
    if filters.payment_date_to is not None:
        conditions.append(Payment.payment_date <= filters.payment_date_to)

    tenant_id = filters.tenant_id if principal.role == UserRole.ADMIN else None

    return await crud.payment_crud.get_multi(
        db,
        pagination,
        scope=scope_filter(principal, EntityKind.PAYMENT),
        filters={
            "status": filters.status,
            "property_id": filters.property_id,
            "tenant_id": tenant_id,
            "payment_method": filters.payment_method,
        },
        conditions=conditions,
    )


async def get_payment(
    db: AsyncSession, principal: AuthenticatedUser, payment_id: int
) -> Payment:
    payment = await _get_payment_or_404(db, payment_id)
    ensure_access(principal, Action.READ, AccessTarget.for_payment(payment))
    return payment


async def _unique_transaction_id(db: AsyncSession) -> str:
    """Generate a transaction ID not yet used by any payment."""
    for _ in range(settings.transaction_id_attempts):
        transaction_id = generate_transaction_id()
        if not await crud.transaction_id_exists(db, transaction_id):
            return transaction_id
    raise ConflictError("Could not allocate a unique transaction ID")


async def _settle_schedule(
    db: AsyncSession, schedule_id: int, payment_amount: Decimal
) -> None:
    """Move the schedule status for a new payment with compare-and-set.

    A failed compare means another payment changed the status since it was
    read, so the status is read again and re-derived.
    """
    for _ in range(MAX_SETTLEMENT_ATTEMPTS):
        state = await crud.get_schedule_settlement_state(db, schedule_id)
        if state is None:
            raise NotFoundError("Rent schedule not found")
        current, schedule_amount = state

        new = settlement.derive_schedule_status(
            current, schedule_amount, payment_amount
        )
        if new == current:
            return
        if await crud.set_schedule_status_if(db, schedule_id, current, new):
            logger.info(
                "Rent schedule settled",
                extra={
                    "rent_schedule_id": schedule_id,
                    "from_status": current.value,
                    "to_status": new.value,
                },
            )
            return

    raise ConflictError(
        "Rent schedule status kept changing, payment not recorded",
        details={"rent_schedule_id": schedule_id},
    )


async def record_payment(
    db: AsyncSession, principal: AuthenticatedUser, data: PaymentCreate
) -> Payment:
    """Record a payment and derive the schedule's new status.

    Raises:
        NotFoundError: If the rent schedule does not exist
        PermissionError: If the principal may not pay this schedule
        ValidationError: On a negative amount or late fee
        ConflictError: If no unique transaction ID could be stored
    """
    schedule = await _get_schedule_or_404(db, data.rent_schedule_id)
    ensure_access(principal, Action.CREATE, AccessTarget.for_new_payment(schedule))
    _ensure_non_negative("amount", data.amount)
    _ensure_non_negative("late_fee_paid", data.late_fee_paid)

    transaction_id = await _unique_transaction_id(db)
    payment = Payment(
        rent_schedule_id=schedule.id,
        property_id=schedule.property_id,
        tenant_id=schedule.tenant_id,
        amount=data.amount,
        payment_date=data.payment_date or utc_now(),
        payment_method=data.payment_method,
        status=PaymentStatus.COMPLETED,
        transaction_id=transaction_id,
        receipt=data.receipt,
        notes=data.notes,
        late_fee_paid=data.late_fee_paid,
        partial_payment=settlement.is_partial_payment(schedule.amount, data.amount),
    )
    db.add(payment)
    try:
        await db.flush()
    except IntegrityError as e:
        await db.rollback()
        raise ConflictError(
            "Payment transaction ID already exists",
            details={"transaction_id": transaction_id},
        ) from e

    try:
        await _settle_schedule(db, schedule.id, data.amount)
    except Exception:
        await db.rollback()
        raise

    await db.commit()

    logger.info(
        "Payment recorded",
        extra={
            "payment_id": payment.id,
            "rent_schedule_id": schedule.id,
            "transaction_id": transaction_id,
            "amount": str(data.amount),
        },
    )
    return await _get_payment_or_404(db, payment.id)


async def refund_payment(
    db: AsyncSession, principal: AuthenticatedUser, payment_id: int
) -> Payment:
    """Mark a completed payment as refunded. The schedule is left as is.

    Raises:
        NotFoundError: If the payment does not exist
        PermissionError: If the principal may not refund it
        InvalidStateError: If the payment is not completed
    """
    payment = await _get_payment_or_404(db, payment_id)
    ensure_access(principal, Action.REFUND, AccessTarget.for_payment(payment))

    if payment.status != PaymentStatus.COMPLETED:
        raise InvalidStateError(
            "Only completed payments can be refunded",
            details={"payment_id": payment_id, "status": payment.status.value},
        )

    refunded = await crud.set_payment_status_if(
        db, payment_id, PaymentStatus.COMPLETED, PaymentStatus.REFUNDED
    )
    if not refunded:
        await db.rollback()
        raise InvalidStateError(
            "Payment status changed concurrently, refund rejected",
            details={"payment_id": payment_id},
        )
    await db.commit()

    logger.info("Payment refunded", extra={"payment_id": payment_id})
    return await _get_payment_or_404(db, payment_id)
