"""Rent schedule and payment schemas."""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from ..auth.schemas import UserSummary
from ..property_management.schemas import PropertySummary
from .models import Frequency, PaymentMethod, PaymentStatus, RentStatus

# ----- Rent Schedule Schemas -----


class RentScheduleCreate(BaseModel):
    """Schema for creating a single rent schedule."""

    property_id: int
    tenant_id: int
    amount: Decimal
    due_date: date
    payment_method: PaymentMethod = PaymentMethod.ONLINE
    late_fee: Decimal = Decimal("0")
    notes: str | None = None
    recurring: bool = True
    frequency: Frequency = Frequency.MONTHLY


class BulkRentScheduleCreate(BaseModel):
    """Schema for generating recurring rent schedules over a date range."""

    property_id: int
    tenant_id: int
    amount: Decimal
    start_date: date
    end_date: date
    frequency: Frequency
    payment_method: PaymentMethod | None = None


class RentScheduleUpdate(BaseModel):
    """Schema for updating a rent schedule. Unset fields are left untouched."""

    amount: Decimal | None = None
    due_date: date | None = None
    status: RentStatus | None = None
    payment_method: PaymentMethod | None = None
    late_fee: Decimal | None = None
    notes: str | None = None
    recurring: bool | None = None
    frequency: Frequency | None = None

    @field_validator(
        "amount",
        "due_date",
        "status",
        "payment_method",
        "late_fee",
        "recurring",
        "frequency",
    )
    @classmethod
    def reject_null(cls, v, info):
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v


class RentScheduleFilters(BaseModel):
    status: RentStatus | None = None
    property_id: int | None = None
    tenant_id: int | None = None
    due_date_from: date | None = None
    due_date_to: date | None = None


class RentScheduleSummary(BaseModel):
    """Compact schedule view embedded in payments."""

    id: int
    amount: Decimal
    due_date: date
    status: RentStatus

    class Config:
        from_attributes = True


class RentScheduleResponse(BaseModel):
    """Schema for rent schedule response."""

    id: int
    property_id: int
    tenant_id: int
    amount: Decimal
    due_date: date
    status: RentStatus
    payment_method: PaymentMethod
    late_fee: Decimal
    notes: str | None = None
    recurring: bool
    frequency: Frequency
    property: PropertySummary | None = None
    tenant: UserSummary | None = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class BulkRentScheduleResponse(BaseModel):
    count: int
    schedules: list[RentScheduleResponse] = Field(default_factory=list)


# ----- Payment Schemas -----


class PaymentCreate(BaseModel):
    """Schema for recording a payment against a rent schedule."""

    rent_schedule_id: int
    amount: Decimal
    payment_method: PaymentMethod
    notes: str | None = None
    receipt: str | None = Field(None, max_length=500)
    late_fee_paid: Decimal = Decimal("0")
    payment_date: datetime | None = None


class PaymentFilters(BaseModel):
    status: PaymentStatus | None = None
    property_id: int | None = None
    tenant_id: int | None = None
    payment_method: PaymentMethod | None = None
    payment_date_from: datetime | None = None
    payment_date_to: datetime | None = None


class PaymentResponse(BaseModel):
    """Schema for payment response."""

    id: int
    rent_schedule_id: int
    property_id: int
    tenant_id: int
    amount: Decimal
    payment_date: datetime
    payment_method: PaymentMethod
    status: PaymentStatus
    transaction_id: str
    receipt: str | None = None
    notes: str | None = None
    late_fee_paid: Decimal
    partial_payment: bool
    rent_schedule: RentScheduleSummary | None = None
    property: PropertySummary | None = None
    tenant: UserSummary | None = None
    created_at: datetime

    class Config:
        from_attributes = True
