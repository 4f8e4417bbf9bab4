"""
Current user API router
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.auth import get_current_principal
from app.api.schemas import (
    OkResponse,
    PasswordChangeRequest,
    ProfileUpdateRequest,
    UserResponse,
)
from app.api.services.user_manager import UserManager
from app.core.async_database import get_db
from app.core.security import Principal

router = APIRouter()

user_manager = UserManager()


@router.get("", response_model=UserResponse)
async def get_me(
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    return UserResponse(user=await user_manager.get_user(db, principal))


@router.patch("", response_model=UserResponse)
async def update_me(
    request: ProfileUpdateRequest,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    """Change display name"""
    user = await user_manager.update_display_name(db, principal, request.display_name)
    return UserResponse(user=user)


@router.patch("/password", response_model=OkResponse)
async def change_password(
    request: PasswordChangeRequest,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    await user_manager.change_password(
        db, principal, request.current_password, request.new_password
    )
    return OkResponse(ok=True)
