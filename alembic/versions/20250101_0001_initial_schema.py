"""Initial schema for the RentRoll backend

Revision ID: 0001
Revises:
Create Date: 2025-01-01

Creates all tables for:
- Users (single table for admin, landlord and tenant roles)
- Property Management (properties, property_maintenance_records)
- Rent Management (rent_schedules, payments)

Enum columns store member names, matching SQLAlchemy's default Enum mapping.
"""
from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

PROPERTY_TYPE = sa.Enum(
    "APARTMENT", "HOUSE", "CONDO", "TOWNHOUSE", "COMMERCIAL", name="propertytype"
)
PROPERTY_STATUS = sa.Enum(
    "AVAILABLE", "OCCUPIED", "MAINTENANCE", "UNAVAILABLE", name="propertystatus"
)
MAINTENANCE_STATUS = sa.Enum(
    "PENDING", "IN_PROGRESS", "COMPLETED", name="maintenancestatus"
)
RENT_STATUS = sa.Enum("PENDING", "PAID", "OVERDUE", "PARTIAL", name="rentstatus")
FREQUENCY = sa.Enum("MONTHLY", "QUARTERLY", "YEARLY", name="frequency")
PAYMENT_METHOD = sa.Enum(
    "ONLINE", "CHECK", "CASH", "BANK_TRANSFER", name="paymentmethod"
)
PAYMENT_STATUS = sa.Enum(
    "PENDING", "COMPLETED", "FAILED", "REFUNDED", name="paymentstatus"
)


def timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    """Create all tables."""

    # users - admin, landlord and tenant rows discriminated by role
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("first_name", sa.String(120), nullable=False),
        sa.Column("last_name", sa.String(120), nullable=True),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("role", sa.String(20), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="1"),
        # landlord
        sa.Column("company_name", sa.String(255), nullable=True),
        sa.Column("company_registration_number", sa.String(100), nullable=True),
        sa.Column("company_phone", sa.String(50), nullable=True),
        sa.Column("company_address", sa.Text(), nullable=True),
        # tenant
        sa.Column("emergency_contact_name", sa.String(255), nullable=True),
        sa.Column("emergency_contact_phone", sa.String(50), nullable=True),
        sa.Column("emergency_contact_relationship", sa.String(100), nullable=True),
        sa.Column("move_in_date", sa.Date(), nullable=True),
        sa.Column("lease_end_date", sa.Date(), nullable=True),
        *timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )
    op.create_index("ix_users_role", "users", ["role"])

    # properties
    op.create_table(
        "properties",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("street", sa.String(255), nullable=False),
        sa.Column("city", sa.String(120), nullable=False),
        sa.Column("state", sa.String(120), nullable=False),
        sa.Column("zip_code", sa.String(20), nullable=False),
        sa.Column("country", sa.String(120), nullable=False),
        sa.Column("property_type", PROPERTY_TYPE, nullable=False),
        sa.Column("bedrooms", sa.Integer(), nullable=False),
        sa.Column("bathrooms", sa.Numeric(4, 1), nullable=False),
        sa.Column("square_footage", sa.Integer(), nullable=True),
        sa.Column("monthly_rent", sa.Numeric(12, 2), nullable=False),
        sa.Column("security_deposit", sa.Numeric(12, 2), nullable=False),
        sa.Column("amenities", sa.JSON(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("landlord_id", sa.Integer(), nullable=False),
        sa.Column("current_tenant_id", sa.Integer(), nullable=True),
        sa.Column("status", PROPERTY_STATUS, nullable=False),
        sa.Column("lease_start_date", sa.Date(), nullable=True),
        sa.Column("lease_end_date", sa.Date(), nullable=True),
        sa.Column("lease_renewal_terms", sa.Text(), nullable=True),
        *timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["landlord_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["current_tenant_id"], ["users.id"]),
    )
    op.create_index("ix_properties_landlord", "properties", ["landlord_id"])
    op.create_index("ix_properties_tenant", "properties", ["current_tenant_id"])
    op.create_index("ix_properties_status", "properties", ["status"])

    # property_maintenance_records - append-only log per property
    op.create_table(
        "property_maintenance_records",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("property_id", sa.Integer(), nullable=False),
        sa.Column("issue", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("reported_by_id", sa.Integer(), nullable=True),
        sa.Column("reported_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("status", MAINTENANCE_STATUS, nullable=False),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("cost", sa.Numeric(12, 2), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["property_id"], ["properties.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["reported_by_id"], ["users.id"]),
    )
    op.create_index(
        "ix_maintenance_property", "property_maintenance_records", ["property_id"]
    )

    # rent_schedules
    op.create_table(
        "rent_schedules",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("property_id", sa.Integer(), nullable=False),
        sa.Column("tenant_id", sa.Integer(), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("due_date", sa.Date(), nullable=False),
        sa.Column("status", RENT_STATUS, nullable=False),
        sa.Column("payment_method", PAYMENT_METHOD, nullable=False),
        sa.Column("late_fee", sa.Numeric(12, 2), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("recurring", sa.Boolean(), nullable=False),
        sa.Column("frequency", FREQUENCY, nullable=False),
        *timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["property_id"], ["properties.id"]),
        sa.ForeignKeyConstraint(["tenant_id"], ["users.id"]),
    )
    op.create_index(
        "ix_rent_schedules_property_tenant_due",
        "rent_schedules",
        ["property_id", "tenant_id", "due_date"],
    )
    op.create_index("ix_rent_schedules_status", "rent_schedules", ["status"])

    # payments
    op.create_table(
        "payments",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("rent_schedule_id", sa.Integer(), nullable=False),
        sa.Column("property_id", sa.Integer(), nullable=False),
        sa.Column("tenant_id", sa.Integer(), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("payment_date", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("payment_method", PAYMENT_METHOD, nullable=False),
        sa.Column("status", PAYMENT_STATUS, nullable=False),
        sa.Column("transaction_id", sa.String(64), nullable=False),
        sa.Column("receipt", sa.String(500), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("late_fee_paid", sa.Numeric(12, 2), nullable=False),
        sa.Column("partial_payment", sa.Boolean(), nullable=False),
        *timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["rent_schedule_id"], ["rent_schedules.id"]),
        sa.ForeignKeyConstraint(["property_id"], ["properties.id"]),
        sa.ForeignKeyConstraint(["tenant_id"], ["users.id"]),
        sa.UniqueConstraint("transaction_id"),
    )
    op.create_index(
        "ix_payments_tenant_property_date",
        "payments",
        ["tenant_id", "property_id", "payment_date"],
    )
    op.create_index("ix_payments_schedule", "payments", ["rent_schedule_id"])


def downgrade() -> None:
    """Drop all tables in reverse order."""
    op.drop_table("payments")
    op.drop_table("rent_schedules")
    op.drop_table("property_maintenance_records")
    op.drop_table("properties")
    op.drop_table("users")
