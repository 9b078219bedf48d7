"""Tenant profile schemas."""

from datetime import date

from pydantic import BaseModel, Field, field_validator

from ..auth.schemas import TenantResponse
from ..property_management.schemas import PropertySummary


class TenantProfileUpdate(BaseModel):
    """Fields a tenant profile update may change. Email and role are fixed."""

    first_name: str | None = Field(None, min_length=1, max_length=120)
    last_name: str | None = Field(None, max_length=120)
    phone: str | None = Field(None, max_length=50)
    emergency_contact_name: str | None = Field(None, max_length=255)
    emergency_contact_phone: str | None = Field(None, max_length=50)
    emergency_contact_relationship: str | None = Field(None, max_length=100)
    move_in_date: date | None = None
    lease_end_date: date | None = None

    @field_validator("first_name")
    @classmethod
    def first_name_not_null(cls, v):
        if v is None:
            raise ValueError("first_name cannot be null")
        return v


class TenantProfileResponse(TenantResponse):
    """Tenant profile with the properties the caller may see."""

    properties: list[PropertySummary] = Field(default_factory=list)


class AssignPropertyRequest(BaseModel):
    property_id: int
    move_in_date: date | None = None
    lease_end_date: date | None = None


class RemovePropertyRequest(BaseModel):
    property_id: int
