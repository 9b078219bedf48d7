"""Property management API routes."""

from decimal import Decimal
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ...database import get_db
from ..auth.dependencies import CurrentUser
from ..commons import BaseResponse, PaginatedResponse, PaginationParams
from . import services
from .models import PropertyStatus, PropertyType
from .schemas import (
    MaintenanceCreate,
    MaintenanceResponse,
    MaintenanceUpdate,
    PropertyCreate,
    PropertyFilters,
    PropertyResponse,
    PropertyUpdate,
)

router = APIRouter(prefix="/properties", tags=["Properties"])


@router.get("", response_model=BaseResponse[PaginatedResponse[PropertyResponse]])
async def list_properties(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    status: PropertyStatus | None = Query(None),
    property_type: PropertyType | None = Query(None),
    city: str | None = Query(None),
    state: str | None = Query(None),
    min_rent: Decimal | None = Query(None, ge=0),
    max_rent: Decimal | None = Query(None, ge=0),
    search: str | None = Query(None),
):
    """Get the properties visible to the caller, with filtering."""
    properties, total = await services.list_properties(
        db,
        current_user,
        PaginationParams(page=page, page_size=page_size),
        PropertyFilters(
            status=status,
            property_type=property_type,
            city=city,
            state=state,
            min_rent=min_rent,
            max_rent=max_rent,
            search=search,
        ),
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


@router.get("/{property_id}", response_model=BaseResponse[PropertyResponse])
async def get_property(
    property_id: int,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Get a property by ID."""
    property_obj = await services.get_property(db, current_user, property_id)
    return BaseResponse(
        success=True,
        data=PropertyResponse.model_validate(property_obj),
    )


@router.post(
    "",
    response_model=BaseResponse[PropertyResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_property(
    data: PropertyCreate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Create a new property."""
    property_obj = await services.create_property(db, current_user, data)

    return BaseResponse(
        success=True,
        message="Property created successfully",
        data=PropertyResponse.model_validate(property_obj),
    )


@router.put("/{property_id}", response_model=BaseResponse[PropertyResponse])
async def update_property(
    property_id: int,
    data: PropertyUpdate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Update a property."""
    property_obj = await services.update_property(db, current_user, property_id, data)

    return BaseResponse(
        success=True,
        message="Property updated successfully",
        data=PropertyResponse.model_validate(property_obj),
    )


@router.delete("/{property_id}", response_model=BaseResponse[None])
async def delete_property(
    property_id: int,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Delete a vacant property without rent schedules."""
    await services.delete_property(db, current_user, property_id)

    return BaseResponse(
        success=True,
        message="Property deleted successfully",
    )


# ----- Maintenance -----


@router.post(
    "/{property_id}/maintenance",
    response_model=BaseResponse[MaintenanceResponse],
    status_code=status.HTTP_201_CREATED,
)
async def report_maintenance(
    property_id: int,
    data: MaintenanceCreate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Add a maintenance request to a property."""
    record = await services.report_maintenance(db, current_user, property_id, data)

    return BaseResponse(
        success=True,
        message="Maintenance request added successfully",
        data=MaintenanceResponse.model_validate(record),
    )


@router.patch(
    "/{property_id}/maintenance/{record_id}",
    response_model=BaseResponse[MaintenanceResponse],
)
async def update_maintenance(
    property_id: int,
    record_id: int,
    data: MaintenanceUpdate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Update the status of a maintenance request."""
    record = await services.update_maintenance(
        db, current_user, property_id, record_id, data
    )

    return BaseResponse(
        success=True,
        message="Maintenance request updated successfully",
        data=MaintenanceResponse.model_validate(record),
    )
