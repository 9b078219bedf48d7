"""User API routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from ...database import get_db
from ..commons import BaseResponse
from . import services
from .dependencies import AdminPrincipal, CurrentUser
from .schemas import UserCreate, UserResponse, user_to_response

router = APIRouter(prefix="/users", tags=["Users"])


@router.post(
    "",
    response_model=BaseResponse[UserResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_user(
    current_user: AdminPrincipal,
    data: UserCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Create a user of a given role (admin only)."""
    user = await services.create_user(db, data)

    return BaseResponse(
        success=True,
        message=f"{data.role.capitalize()} user created successfully",
        data=user_to_response(user),
    )


@router.get("/me", response_model=BaseResponse[UserResponse])
async def get_current_user_info(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Get the current principal's profile."""
    user = await services.get_profile(db, current_user)

    return BaseResponse(success=True, data=user_to_response(user))
