"""
Admin moderation API router
"""

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.auth import require_admin
from app.api.schemas import (
    ManagedLocationInfo,
    ManagedLocationListResponse,
    OkResponse,
    StatusHistoryResponse,
    StatusUpdateRequest,
)
from app.api.services.location_manager import LocationManager
from app.api.services.validators import location_id_param
from app.core.async_database import get_db
from app.core.security import Principal
from app.models import LocationStatus

router = APIRouter()

location_manager = LocationManager()


@router.get("/locations", response_model=ManagedLocationListResponse)
async def list_locations(
    status: Optional[str] = None,
    page: Optional[int] = None,
    limit: Optional[int] = None,
    principal: Principal = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """All locations, optionally filtered by status"""
    return await location_manager.list_admin_locations(db, status=status, page=page, limit=limit)


@router.get("/locations/{location_id}", response_model=ManagedLocationInfo)
async def get_location(
    principal: Principal = Depends(require_admin),
    location_id: int = Depends(location_id_param),
    db: AsyncSession = Depends(get_db),
):
    return await location_manager.get_admin_location(db, location_id)


@router.get("/locations/{location_id}/history", response_model=StatusHistoryResponse)
async def get_status_history(
    principal: Principal = Depends(require_admin),
    location_id: int = Depends(location_id_param),
    db: AsyncSession = Depends(get_db),
):
    """Moderation audit trail, oldest first"""
    return await location_manager.status_history(db, location_id)


@router.patch("/locations/{location_id}/status", response_model=ManagedLocationInfo)
async def set_location_status(
    request: StatusUpdateRequest,
    principal: Principal = Depends(require_admin),
    location_id: int = Depends(location_id_param),
    db: AsyncSession = Depends(get_db),
):
    """Set status to APPROVED, REJECTED or HIDDEN"""
    return await location_manager.set_status(db, principal, location_id, request.status)


@router.patch("/locations/{location_id}/approve", response_model=ManagedLocationInfo)
async def approve_location(
    principal: Principal = Depends(require_admin),
    location_id: int = Depends(location_id_param),
    db: AsyncSession = Depends(get_db),
):
    return await location_manager.set_status(
        db, principal, location_id, LocationStatus.APPROVED.value
    )


@router.patch("/locations/{location_id}/reject", response_model=ManagedLocationInfo)
async def reject_location(
    principal: Principal = Depends(require_admin),
    location_id: int = Depends(location_id_param),
    db: AsyncSession = Depends(get_db),
):
    return await location_manager.set_status(
        db, principal, location_id, LocationStatus.REJECTED.value
    )


@router.patch("/locations/{location_id}/hide", response_model=ManagedLocationInfo)
async def hide_location(
    principal: Principal = Depends(require_admin),
    location_id: int = Depends(location_id_param),
    db: AsyncSession = Depends(get_db),
):
    return await location_manager.set_status(
        db, principal, location_id, LocationStatus.HIDDEN.value
    )


@router.delete("/locations/{location_id}", response_model=OkResponse)
async def delete_location(
    principal: Principal = Depends(require_admin),
    location_id: int = Depends(location_id_param),
    db: AsyncSession = Depends(get_db),
):
    """Delete a location (HIDDEN only)"""
    await location_manager.delete_location(db, principal, location_id)
    return OkResponse(ok=True)
