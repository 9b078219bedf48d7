"""Rent schedule and payment API routes."""

from datetime import date, datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ...database import get_db
from ..auth.dependencies import CurrentUser
from ..commons import BaseResponse, PaginatedResponse, PaginationParams
from . import services
from .models import PaymentMethod, PaymentStatus, RentStatus
from .schemas import (
    BulkRentScheduleCreate,
    BulkRentScheduleResponse,
    PaymentCreate,
    PaymentFilters,
    PaymentResponse,
    RentScheduleCreate,
    RentScheduleFilters,
    RentScheduleResponse,
    RentScheduleUpdate,
)

schedules_router = APIRouter(prefix="/rent-schedules", tags=["Rent Schedules"])
payments_router = APIRouter(prefix="/payments", tags=["Payments"])


# ----- Rent Schedules -----


@schedules_router.get(
    "", response_model=BaseResponse[PaginatedResponse[RentScheduleResponse]]
)
async def list_rent_schedules(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    status: RentStatus | None = Query(None),
    property_id: int | None = Query(None),
    tenant_id: int | None = Query(None),
    due_date_from: date | None = Query(None),
    due_date_to: date | None = Query(None),
):
    """Get the rent schedules visible to the caller."""
    schedules, total = await services.list_schedules(
        db,
        current_user,
        PaginationParams(page=page, page_size=page_size),
        RentScheduleFilters(
            status=status,
            property_id=property_id,
            tenant_id=tenant_id,
            due_date_from=due_date_from,
            due_date_to=due_date_to,
        ),
    )

    return BaseResponse(
        success=True,
        data=PaginatedResponse.from_items(
            items=[RentScheduleResponse.model_validate(s) for s in schedules],
            total=total,
            page=page,
            page_size=page_size,
        ),
    )


@schedules_router.post(
    "",
    response_model=BaseResponse[RentScheduleResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_rent_schedule(
    data: RentScheduleCreate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Create a rent schedule."""
    schedule = await services.create_schedule(db, current_user, data)

    return BaseResponse(
        success=True,
        message="Rent schedule created successfully",
        data=RentScheduleResponse.model_validate(schedule),
    )


@schedules_router.post(
    "/bulk",
    response_model=BaseResponse[BulkRentScheduleResponse],
    status_code=status.HTTP_201_CREATED,
)
async def bulk_create_rent_schedules(
    data: BulkRentScheduleCreate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Generate recurring rent schedules between two dates."""
    schedules = await services.bulk_create_schedules(db, current_user, data)

    return BaseResponse(
        success=True,
        message=f"{len(schedules)} rent schedules created successfully",
        data=BulkRentScheduleResponse(
            count=len(schedules),
            schedules=[RentScheduleResponse.model_validate(s) for s in schedules],
        ),
    )


@schedules_router.get(
    "/{schedule_id}", response_model=BaseResponse[RentScheduleResponse]
)
async def get_rent_schedule(
    schedule_id: int,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Get a rent schedule by ID."""
    schedule = await services.get_schedule(db, current_user, schedule_id)
    return BaseResponse(
        success=True,
        data=RentScheduleResponse.model_validate(schedule),
    )


@schedules_router.put(
    "/{schedule_id}", response_model=BaseResponse[RentScheduleResponse]
)
async def update_rent_schedule(
    schedule_id: int,
    data: RentScheduleUpdate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Update a rent schedule."""
    schedule = await services.update_schedule(db, current_user, schedule_id, data)

    return BaseResponse(
        success=True,
        message="Rent schedule updated successfully",
        data=RentScheduleResponse.model_validate(schedule),
    )


@schedules_router.delete("/{schedule_id}", response_model=BaseResponse[None])
async def delete_rent_schedule(
    schedule_id: int,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Delete a rent schedule without payments."""
    await services.delete_schedule(db, current_user, schedule_id)

    return BaseResponse(
        success=True,
        message="Rent schedule deleted successfully",
    )


# ----- Payments -----


@payments_router.get(
    "", response_model=BaseResponse[PaginatedResponse[PaymentResponse]]
)
async def list_payments(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    status: PaymentStatus | None = Query(None),
    property_id: int | None = Query(None),
    tenant_id: int | None = Query(None),
    payment_method: PaymentMethod | None = Query(None),
    payment_date_from: datetime | None = Query(None),
    payment_date_to: datetime | None = Query(None),
):
    """Get the payments visible to the caller."""
    payments, total = await services.list_payments(
        db,
        current_user,
        PaginationParams(page=page, page_size=page_size),
        PaymentFilters(
            status=status,
            property_id=property_id,
            tenant_id=tenant_id,
            payment_method=payment_method,
            payment_date_from=payment_date_from,
            payment_date_to=payment_date_to,
        ),
    )

    return BaseResponse(
        success=True,
        data=PaginatedResponse.from_items(
            items=[PaymentResponse.model_validate(p) for p in payments],
            total=total,
            page=page,
            page_size=page_size,
        ),
    )


@payments_router.post(
    "",
    response_model=BaseResponse[PaymentResponse],
    status_code=status.HTTP_201_CREATED,
)
async def record_payment(
    data: PaymentCreate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Record a payment against a rent schedule."""
    payment = await services.record_payment(db, current_user, data)

    return BaseResponse(
        success=True,
        message="Payment created successfully",
        data=PaymentResponse.model_validate(payment),
    )


@payments_router.get("/{payment_id}", response_model=BaseResponse[PaymentResponse])
async def get_payment(
    payment_id: int,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Get a payment by ID."""
    payment = await services.get_payment(db, current_user, payment_id)
    return BaseResponse(success=True, data=PaymentResponse.model_validate(payment))


@payments_router.post(
    "/{payment_id}/refund", response_model=BaseResponse[PaymentResponse]
)
async def refund_payment(
    payment_id: int,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Mark a completed payment as refunded."""
    payment = await services.refund_payment(db, current_user, payment_id)

    return BaseResponse(
        success=True,
        message="Payment refunded successfully",
        data=PaymentResponse.model_validate(payment),
    )
