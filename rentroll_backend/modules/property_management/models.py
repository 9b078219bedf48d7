"""Property management models.

A property is owned by one landlord and houses at most one tenant at a time.
Maintenance requests are kept as an append-only log per property.
"""

import enum
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    JSON,
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
from ..auth.models import LandlordUser, TenantUser, User


class PropertyType(str, enum.Enum):
    """Property types."""

    APARTMENT = "apartment"
    HOUSE = "house"
    CONDO = "condo"
    TOWNHOUSE = "townhouse"
    COMMERCIAL = "commercial"


class PropertyStatus(str, enum.Enum):
    """Occupancy status of a property."""

    AVAILABLE = "available"
    OCCUPIED = "occupied"
    MAINTENANCE = "maintenance"
    UNAVAILABLE = "unavailable"


class MaintenanceStatus(str, enum.Enum):
    """Maintenance request status values."""

    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class Property(IdentityMixin, TimestampMixin, Base):
    """Rental property.

    ``status`` is ``occupied`` exactly when ``current_tenant_id`` is set.
    """

    __tablename__ = "properties"

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    # Address
    street: Mapped[str] = mapped_column(String(255), nullable=False)
    city: Mapped[str] = mapped_column(String(120), nullable=False)
    state: Mapped[str] = mapped_column(String(120), nullable=False)
    zip_code: Mapped[str] = mapped_column(String(20), nullable=False)
    country: Mapped[str] = mapped_column(String(120), nullable=False, default="USA")

    property_type: Mapped[PropertyType] = mapped_column(
        Enum(PropertyType), nullable=False
    )
    bedrooms: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    bathrooms: Mapped[Decimal] = mapped_column(
        Numeric(4, 1), nullable=False, default=Decimal("0")
    )
    square_footage: Mapped[int | None] = mapped_column(Integer, nullable=True)
    monthly_rent: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    security_deposit: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0")
    )
    amenities: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    landlord_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False
    )
    current_tenant_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=True
    )
    status: Mapped[PropertyStatus] = mapped_column(
        Enum(PropertyStatus), nullable=False, default=PropertyStatus.AVAILABLE
    )

    # Lease terms of the current tenancy
    lease_start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    lease_end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    lease_renewal_terms: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Relationships
    landlord: Mapped["LandlordUser"] = relationship(
        "LandlordUser", foreign_keys=[landlord_id]
    )
    current_tenant: Mapped["TenantUser | None"] = relationship(
        "TenantUser", foreign_keys=[current_tenant_id]
    )
    maintenance_records: Mapped[list["MaintenanceRecord"]] = relationship(
        "MaintenanceRecord",
        back_populates="property",
        cascade="all, delete-orphan",
        order_by="[MaintenanceRecord.reported_at, MaintenanceRecord.id]",
    )

    __table_args__ = (
        Index("ix_properties_landlord", "landlord_id"),
        Index("ix_properties_tenant", "current_tenant_id"),
        Index("ix_properties_status", "status"),
    )

    def __repr__(self) -> str:
        return f"<Property(id={self.id}, name={self.name}, status={self.status})>"


class MaintenanceRecord(IdentityMixin, Base):
    """Maintenance request reported against a property."""

    __tablename__ = "property_maintenance_records"

    property_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("properties.id", ondelete="CASCADE"), nullable=False
    )
    issue: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    reported_by_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=True
    )
    reported_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    status: Mapped[MaintenanceStatus] = mapped_column(
        Enum(MaintenanceStatus), nullable=False, default=MaintenanceStatus.PENDING
    )
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    cost: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)

    # Relationships
    property: Mapped["Property"] = relationship(
        "Property", back_populates="maintenance_records"
    )
    reported_by: Mapped["User | None"] = relationship("User")

    __table_args__ = (Index("ix_maintenance_property", "property_id"),)

    def __repr__(self) -> str:
        return f"<MaintenanceRecord(id={self.id}, issue={self.issue})>"
