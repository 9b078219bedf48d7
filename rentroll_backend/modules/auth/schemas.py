"""User and principal schemas."""

from datetime import date, datetime
from typing import Literal, Union

from pydantic import BaseModel, EmailStr, Field

from .models import UserRole

# ----- Principal -----


class AuthenticatedUser(BaseModel):
    """Principal resolved from a bearer token."""

    id: int
    role: UserRole
    email: str | None = None

    class Config:
        from_attributes = True


# ----- Create Schemas -----


class UserBase(BaseModel):
    """Base user schema."""

    email: EmailStr
    first_name: str = Field(..., min_length=1, max_length=120)
    last_name: str | None = Field(None, max_length=120)
    phone: str | None = Field(None, max_length=50)


class AdminCreate(UserBase):
    role: Literal["admin"]


class LandlordCreate(UserBase):
    role: Literal["landlord"]
    company_name: str | None = Field(None, max_length=255)
    company_registration_number: str | None = Field(None, max_length=100)
    company_phone: str | None = Field(None, max_length=50)
    company_address: str | None = None


class TenantCreate(UserBase):
    role: Literal["tenant"]
    emergency_contact_name: str | None = Field(None, max_length=255)
    emergency_contact_phone: str | None = Field(None, max_length=50)
    emergency_contact_relationship: str | None = Field(None, max_length=100)
    move_in_date: date | None = None
    lease_end_date: date | None = None


# The role literal selects the variant
UserCreate = Union[AdminCreate, LandlordCreate, TenantCreate]


# ----- Response Schemas -----


class UserSummary(BaseModel):
    """Compact user view embedded in other resources."""

    id: int
    email: str
    first_name: str
    last_name: str | None = None
    role: UserRole

    class Config:
        from_attributes = True


class UserResponseBase(BaseModel):
    id: int
    email: str
    first_name: str
    last_name: str | None = None
    phone: str | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class AdminResponse(UserResponseBase):
    role: Literal["admin"] = "admin"


class LandlordResponse(UserResponseBase):
    role: Literal["landlord"] = "landlord"
    company_name: str | None = None
    company_registration_number: str | None = None
    company_phone: str | None = None
    company_address: str | None = None


class TenantResponse(UserResponseBase):
    role: Literal["tenant"] = "tenant"
    emergency_contact_name: str | None = None
    emergency_contact_phone: str | None = None
    emergency_contact_relationship: str | None = None
    move_in_date: date | None = None
    lease_end_date: date | None = None


UserResponse = Union[AdminResponse, LandlordResponse, TenantResponse]

_RESPONSE_BY_ROLE: dict[str, type[UserResponseBase]] = {
    UserRole.ADMIN.value: AdminResponse,
    UserRole.LANDLORD.value: LandlordResponse,
    UserRole.TENANT.value: TenantResponse,
}


def user_to_response(user) -> UserResponseBase:
    """Serialize a user with the schema of its own role."""
    return _RESPONSE_BY_ROLE[user.role].model_validate(user)
