"""Property management schemas."""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from ..auth.schemas import UserSummary
from .models import MaintenanceStatus, PropertyStatus, PropertyType

# ----- Property Schemas -----


class PropertyBase(BaseModel):
    """Base property schema."""

    name: str = Field(..., min_length=1, max_length=255)
    street: str = Field(..., min_length=1, max_length=255)
    city: str = Field(..., min_length=1, max_length=120)
    state: str = Field(..., min_length=1, max_length=120)
    zip_code: str = Field(..., min_length=1, max_length=20)
    country: str = Field(default="USA", max_length=120)
    property_type: PropertyType
    bedrooms: int = Field(default=0, ge=0)
    bathrooms: Decimal = Field(default=Decimal("0"), ge=0)
    square_footage: int | None = Field(None, ge=0)
    monthly_rent: Decimal = Field(..., ge=0)
    security_deposit: Decimal = Field(default=Decimal("0"), ge=0)
    amenities: list[str] = Field(default_factory=list)
    description: str | None = None
    lease_renewal_terms: str | None = None


class PropertyCreate(PropertyBase):
    """Schema for creating a property.

    Landlords may omit ``landlord_id``; admins must name the owning landlord.
    """

    landlord_id: int | None = None
    status: PropertyStatus | None = None


class PropertyUpdate(BaseModel):
    """Schema for updating a property. Unset fields are left untouched."""

    name: str | None = Field(None, min_length=1, max_length=255)
    street: str | None = Field(None, min_length=1, max_length=255)
    city: str | None = Field(None, min_length=1, max_length=120)
    state: str | None = Field(None, min_length=1, max_length=120)
    zip_code: str | None = Field(None, min_length=1, max_length=20)
    country: str | None = Field(None, max_length=120)
    property_type: PropertyType | None = None
    bedrooms: int | None = Field(None, ge=0)
    bathrooms: Decimal | None = Field(None, ge=0)
    square_footage: int | None = Field(None, ge=0)
    monthly_rent: Decimal | None = Field(None, ge=0)
    security_deposit: Decimal | None = Field(None, ge=0)
    amenities: list[str] | None = None
    description: str | None = None
    lease_renewal_terms: str | None = None
    status: PropertyStatus | None = None

    @field_validator(
        "name",
        "street",
        "city",
        "state",
        "zip_code",
        "country",
        "property_type",
        "bedrooms",
        "bathrooms",
        "monthly_rent",
        "security_deposit",
        "amenities",
    )
    @classmethod
    def reject_null(cls, v, info):
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v


class PropertyFilters(BaseModel):
    """Query filters for listing properties."""

    status: PropertyStatus | None = None
    property_type: PropertyType | None = None
    city: str | None = None
    state: str | None = None
    min_rent: Decimal | None = Field(None, ge=0)
    max_rent: Decimal | None = Field(None, ge=0)
    search: str | None = None


class PropertySummary(BaseModel):
    """Compact property view embedded in other resources."""

    id: int
    name: str
    street: str
    city: str
    state: str
    monthly_rent: Decimal
    status: PropertyStatus

    class Config:
        from_attributes = True


# ----- Maintenance Schemas -----


class MaintenanceCreate(BaseModel):
    issue: str = Field(..., min_length=1, max_length=255)
    description: str | None = None


class MaintenanceUpdate(BaseModel):
    status: MaintenanceStatus
    cost: Decimal | None = Field(None, ge=0)


class MaintenanceResponse(BaseModel):
    id: int
    property_id: int
    issue: str
    description: str | None = None
    reported_by_id: int | None = None
    reported_at: datetime
    status: MaintenanceStatus
    completed_at: datetime | None = None
    cost: Decimal | None = None

    class Config:
        from_attributes = True


class PropertyResponse(PropertyBase):
    """Schema for property response."""

    id: int
    landlord_id: int
    current_tenant_id: int | None = None
    status: PropertyStatus
    lease_start_date: date | None = None
    lease_end_date: date | None = None
    landlord: UserSummary | None = None
    current_tenant: UserSummary | None = None
    maintenance_records: list[MaintenanceResponse] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
