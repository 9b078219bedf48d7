"""Tenant management API routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ...database import get_db
from ..auth.dependencies import CurrentUser, ManagerPrincipal
from ..auth.models import TenantUser
from ..auth.schemas import AuthenticatedUser
from ..commons import BaseResponse, PaginatedResponse, PaginationParams
from ..property_management.schemas import PropertyResponse, PropertySummary
from . import services
from .schemas import (
    AssignPropertyRequest,
    RemovePropertyRequest,
    TenantProfileResponse,
    TenantProfileUpdate,
)

router = APIRouter(prefix="/tenants", tags=["Tenants"])


def to_profile(
    principal: AuthenticatedUser, tenant: TenantUser
) -> TenantProfileResponse:
    profile = TenantProfileResponse.model_validate(tenant)
    profile.properties = [
        PropertySummary.model_validate(p)
        for p in services.visible_properties(principal, tenant)
    ]
    return profile


@router.get("", response_model=BaseResponse[PaginatedResponse[TenantProfileResponse]])
async def list_tenants(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    search: str | None = Query(None),
    has_property: bool | None = Query(None),
):
    """Get the tenant profiles visible to the caller."""
    tenants, total = await services.list_tenants(
        db,
        current_user,
        PaginationParams(page=page, page_size=page_size),
        search,
        has_property,
    )

    return BaseResponse(
        success=True,
        data=PaginatedResponse.from_items(
            items=[to_profile(current_user, t) for t in tenants],
            total=total,
            page=page,
            page_size=page_size,
        ),
    )


@router.get("/{tenant_id}", response_model=BaseResponse[TenantProfileResponse])
async def get_tenant(
    tenant_id: int,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Get a tenant profile by ID."""
    tenant = await services.get_tenant(db, current_user, tenant_id)
    return BaseResponse(success=True, data=to_profile(current_user, tenant))


@router.put("/{tenant_id}", response_model=BaseResponse[TenantProfileResponse])
async def update_tenant(
    tenant_id: int,
    data: TenantProfileUpdate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Update a tenant profile."""
    tenant = await services.update_tenant(db, current_user, tenant_id, data)

    return BaseResponse(
        success=True,
        message="Tenant updated successfully",
        data=to_profile(current_user, tenant),
    )


@router.post(
    "/{tenant_id}/assign-property", response_model=BaseResponse[PropertyResponse]
)
async def assign_property(
    tenant_id: int,
    data: AssignPropertyRequest,
    current_user: ManagerPrincipal,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Assign a tenant to an available property."""
    property_obj = await services.assign_property(
        db,
        current_user,
        tenant_id,
        data.property_id,
        move_in_date=data.move_in_date,
        lease_end_date=data.lease_end_date,
    )

    return BaseResponse(
        success=True,
        message="Tenant assigned to property successfully",
        data=PropertyResponse.model_validate(property_obj),
    )


@router.post(
    "/{tenant_id}/remove-property", response_model=BaseResponse[PropertyResponse]
)
async def remove_property(
    tenant_id: int,
    data: RemovePropertyRequest,
    current_user: ManagerPrincipal,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Remove a tenant from a property."""
    property_obj = await services.remove_property(
        db, current_user, tenant_id, data.property_id
    )

    return BaseResponse(
        success=True,
        message="Tenant removed from property successfully",
        data=PropertyResponse.model_validate(property_obj),
    )


@router.get(
    "/{tenant_id}/properties",
    response_model=BaseResponse[PaginatedResponse[PropertyResponse]],
)
async def list_tenant_properties(
    tenant_id: int,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
):
    """Get the properties a tenant currently occupies."""
    properties, total = await services.list_tenant_properties(
        db, current_user, tenant_id, PaginationParams(page=page, page_size=page_size)
    )

    return BaseResponse(
        success=True,
        data=PaginatedResponse.from_items(
            items=[PropertyResponse.model_validate(p) for p in properties],
            total=total,
            page=page,
            page_size=page_size,
        ),
    )
