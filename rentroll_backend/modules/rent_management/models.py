"""Rent schedule and payment models."""

import enum
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from ...database import Base, IdentityMixin, TimestampMixin
from ..auth.models import TenantUser
from ..property_management.models import Property


class RentStatus(str, enum.Enum):
    """Rent schedule status values."""

    PENDING = "pending"
    PAID = "paid"
    OVERDUE = "overdue"
    PARTIAL = "partial"


class Frequency(str, enum.Enum):
    """Recurrence of a rent schedule."""

    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


class PaymentMethod(str, enum.Enum):
    """How rent is paid."""

    ONLINE = "online"
    CHECK = "check"
    CASH = "cash"
    BANK_TRANSFER = "bank-transfer"


class PaymentStatus(str, enum.Enum):
    """Payment record status values."""

    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"


class RentSchedule(IdentityMixin, TimestampMixin, Base):
    """A single rent amount due from a tenant for a property.

    Schedules produced together by bulk generation are independent records.
    """

    __tablename__ = "rent_schedules"

    property_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("properties.id"), nullable=False
    )
    tenant_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    due_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[RentStatus] = mapped_column(
        Enum(RentStatus), nullable=False, default=RentStatus.PENDING
    )
    payment_method: Mapped[PaymentMethod] = mapped_column(
        Enum(PaymentMethod), nullable=False, default=PaymentMethod.ONLINE
    )
    late_fee: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0")
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    recurring: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    frequency: Mapped[Frequency] = mapped_column(
        Enum(Frequency), nullable=False, default=Frequency.MONTHLY
    )

    # Relationships
    property: Mapped["Property"] = relationship("Property")
    tenant: Mapped["TenantUser"] = relationship("TenantUser", foreign_keys=[tenant_id])

    __table_args__ = (
        Index(
            "ix_rent_schedules_property_tenant_due",
            "property_id",
            "tenant_id",
            "due_date",
        ),
        Index("ix_rent_schedules_status", "status"),
    )

    def __repr__(self) -> str:
        return (
            f"<RentSchedule(id={self.id}, due_date={self.due_date}, "
            f"status={self.status})>"
        )


class Payment(IdentityMixin, TimestampMixin, Base):
    """Record of money received against a rent schedule.

    Property and tenant are copied from the schedule when recorded.
    """

    __tablename__ = "payments"

    rent_schedule_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("rent_schedules.id"), nullable=False
    )
    property_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("properties.id"), nullable=False
    )
    tenant_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    payment_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    payment_method: Mapped[PaymentMethod] = mapped_column(
        Enum(PaymentMethod), nullable=False
    )
    status: Mapped[PaymentStatus] = mapped_column(
        Enum(PaymentStatus), nullable=False, default=PaymentStatus.COMPLETED
    )
    transaction_id: Mapped[str] = mapped_column(
        String(64), unique=True, nullable=False
    )
    receipt: Mapped[str | None] = mapped_column(String(500), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    late_fee_paid: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0")
    )
    partial_payment: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )

    # Relationships
    rent_schedule: Mapped["RentSchedule"] = relationship("RentSchedule")
    property: Mapped["Property"] = relationship("Property")
    tenant: Mapped["TenantUser"] = relationship("TenantUser", foreign_keys=[tenant_id])

    __table_args__ = (
        Index(
            "ix_payments_tenant_property_date",
            "tenant_id",
            "property_id",
            "payment_date",
        ),
        Index("ix_payments_schedule", "rent_schedule_id"),
    )

    def __repr__(self) -> str:
        return f"<Payment(id={self.id}, transaction_id={self.transaction_id})>"
