"""
Owner self-service API router

Every route is scoped to the caller's own locations; someone else's location
answers 404 exactly like a missing one.
"""

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.auth import require_owner
from app.api.schemas import (
    LocationUpdateRequest,
    ManagedLocationInfo,
    ManagedLocationListResponse,
)
from app.api.services.location_manager import LocationManager
from app.api.services.validators import location_id_param
from app.core.async_database import get_db
from app.core.security import Principal

router = APIRouter()

location_manager = LocationManager()


@router.get("/locations", response_model=ManagedLocationListResponse)
async def list_own_locations(
    status: Optional[str] = None,
    page: Optional[int] = None,
    limit: Optional[int] = None,
    principal: Principal = Depends(require_owner),
    db: AsyncSession = Depends(get_db),
):
    """Caller's locations, any status"""
    return await location_manager.list_owner_locations(
        db, principal, status=status, page=page, limit=limit
    )


@router.get("/locations/{location_id}", response_model=ManagedLocationInfo)
async def get_own_location(
    principal: Principal = Depends(require_owner),
    location_id: int = Depends(location_id_param),
    db: AsyncSession = Depends(get_db),
):
    return await location_manager.get_owner_location(db, principal, location_id)


@router.patch("/locations/{location_id}", response_model=ManagedLocationInfo)
async def update_own_location(
    request: LocationUpdateRequest,
    principal: Principal = Depends(require_owner),
    location_id: int = Depends(location_id_param),
    db: AsyncSession = Depends(get_db),
):
    """Partial update; APPROVED locations go back to PENDING"""
    return await location_manager.update_owner_location(db, principal, location_id, request)


@router.post("/locations/{location_id}/hide", response_model=ManagedLocationInfo)
async def hide_own_location(
    principal: Principal = Depends(require_owner),
    location_id: int = Depends(location_id_param),
    db: AsyncSession = Depends(get_db),
):
    return await location_manager.hide_owner_location(db, principal, location_id)


@router.post("/locations/{location_id}/unhide", response_model=ManagedLocationInfo)
async def unhide_own_location(
    principal: Principal = Depends(require_owner),
    location_id: int = Depends(location_id_param),
    db: AsyncSession = Depends(get_db),
):
    """Send a hidden location back to moderation"""
    return await location_manager.unhide_owner_location(db, principal, location_id)
