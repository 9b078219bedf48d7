"""User models for the RentRoll backend.

Users live in one table; the ``role`` column discriminates the admin,
landlord and tenant variants, each carrying only its own extra columns.
"""

import enum
from datetime import date

from sqlalchemy import Boolean, Date, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ...database import Base, IdentityMixin, TimestampMixin


class UserRole(str, enum.Enum):
    """Roles a principal can hold. Fixed at user creation."""

    ADMIN = "admin"
    LANDLORD = "landlord"
    TENANT = "tenant"


class User(IdentityMixin, TimestampMixin, Base):
    """Common user record shared by all roles."""

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    first_name: Mapped[str] = mapped_column(String(120), nullable=False)
    last_name: Mapped[str | None] = mapped_column(String(120), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    role: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # Load every role's columns so a User query yields complete subclasses
    __mapper_args__ = {"polymorphic_on": "role", "with_polymorphic": "*"}

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"


class AdminUser(User):
    __mapper_args__ = {"polymorphic_identity": UserRole.ADMIN.value}


class LandlordUser(User):
    """Landlord with optional company information."""

    company_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    company_registration_number: Mapped[str | None] = mapped_column(
        String(100), nullable=True
    )
    company_phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    company_address: Mapped[str | None] = mapped_column(Text, nullable=True)

    __mapper_args__ = {"polymorphic_identity": UserRole.LANDLORD.value}


class TenantUser(User):
    """Tenant with emergency contact and tenancy dates."""

    emergency_contact_name: Mapped[str | None] = mapped_column(
        String(255), nullable=True
    )
    emergency_contact_phone: Mapped[str | None] = mapped_column(
        String(50), nullable=True
    )
    emergency_contact_relationship: Mapped[str | None] = mapped_column(
        String(100), nullable=True
    )
    move_in_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    lease_end_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    # Properties whose current tenant is this user
    rented_properties: Mapped[list["Property"]] = relationship(  # noqa: F821
        "Property",
        foreign_keys="Property.current_tenant_id",
        viewonly=True,
    )

    __mapper_args__ = {"polymorphic_identity": UserRole.TENANT.value}
