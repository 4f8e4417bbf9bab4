"""
Public location API router

Guest search and details, contact info for signed-in users, reviews.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.auth import get_current_principal, require_owner, require_reviewer
from app.api.schemas import (
    ContactResponse,
    FishInfo,
    FishListResponse,
    LocationCreateRequest,
    LocationListResponse,
    ManagedLocationInfo,
    RatedLocationInfo,
    ReviewCreateRequest,
    ReviewInfo,
    ReviewListResponse,
    SeasonInfo,
    SeasonListResponse,
)
from app.api.services import catalog
from app.api.services.location_manager import LocationManager
from app.api.services.review_manager import ReviewManager
from app.api.services.validators import location_id_param
from app.core.async_database import get_db
from app.core.security import Principal

router = APIRouter()

location_manager = LocationManager()
review_manager = ReviewManager()


@router.get("", response_model=LocationListResponse)
async def search_locations(
    region: Optional[str] = None,
    water_type: Optional[str] = Query(None, alias="waterType"),
    fish: Optional[str] = Query(None, description="fish name, or several joined with commas"),
    season: Optional[str] = Query(None, description="season code, or several joined with commas"),
    seasons: Optional[str] = None,
    page: Optional[int] = None,
    limit: Optional[int] = None,
    db: AsyncSession = Depends(get_db),
):
    """Search APPROVED locations"""
    season_filter = ",".join(v for v in (season, seasons) if v) or None
    return await location_manager.search_public(
        db,
        region=region,
        water_type=water_type,
        fish=fish,
        seasons=season_filter,
        page=page,
        limit=limit,
    )


@router.post("", response_model=ManagedLocationInfo, status_code=201)
async def create_location(
    request: LocationCreateRequest,
    principal: Principal = Depends(require_owner),
    db: AsyncSession = Depends(get_db),
):
    """Submit a new location (starts PENDING)"""
    return await location_manager.create_location(db, principal, request)


@router.get("/fish", response_model=FishListResponse)
async def list_fish(db: AsyncSession = Depends(get_db)):
    """Fish catalog"""
    rows = await catalog.list_fish(db)
    return FishListResponse(items=[FishInfo(id=f.id, name=f.name) for f in rows])


@router.get("/seasons", response_model=SeasonListResponse)
async def list_seasons(db: AsyncSession = Depends(get_db)):
    """Season catalog"""
    rows = await catalog.list_seasons(db)
    return SeasonListResponse(
        items=[SeasonInfo(id=s.id, code=s.code, name=s.name) for s in rows]
    )


@router.get("/{location_id}", response_model=RatedLocationInfo)
async def get_location(
    location_id: int = Depends(location_id_param), db: AsyncSession = Depends(get_db)
):
    """APPROVED location details with rating"""
    return await location_manager.get_public_location(db, location_id)


@router.get("/{location_id}/contact", response_model=ContactResponse)
async def get_location_contact(
    principal: Principal = Depends(get_current_principal),
    location_id: int = Depends(location_id_param),
    db: AsyncSession = Depends(get_db),
):
    """Contact info, signed-in users only"""
    return await location_manager.get_contact(db, location_id)


@router.get("/{location_id}/reviews", response_model=ReviewListResponse)
async def list_reviews(
    location_id: int = Depends(location_id_param), db: AsyncSession = Depends(get_db)
):
    """Reviews of a location, newest first"""
    return await review_manager.list_reviews(db, location_id)


@router.post("/{location_id}/reviews", response_model=ReviewInfo, status_code=201)
async def create_review(
    request: ReviewCreateRequest,
    principal: Principal = Depends(require_reviewer),
    location_id: int = Depends(location_id_param),
    db: AsyncSession = Depends(get_db),
):
    """Leave a review (one per user per location)"""
    return await review_manager.create_review(db, principal, location_id, request)
