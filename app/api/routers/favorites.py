"""
Favorites API router
"""

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.auth import require_favorites
from app.api.schemas import (
    FavoriteAddResponse,
    FavoriteListResponse,
    FavoriteRemoveResponse,
)
from app.api.services.favorite_manager import FavoriteManager
from app.api.services.validators import location_id_param
from app.core.async_database import get_db
from app.core.security import Principal

router = APIRouter()

favorite_manager = FavoriteManager()


@router.get("", response_model=FavoriteListResponse)
async def list_favorites(
    page: Optional[int] = None,
    limit: Optional[int] = None,
    principal: Principal = Depends(require_favorites),
    db: AsyncSession = Depends(get_db),
):
    """Favorited locations, newest first"""
    return await favorite_manager.list_favorites(db, principal, page=page, limit=limit)


@router.post("/{location_id}", response_model=FavoriteAddResponse)
async def add_favorite(
    principal: Principal = Depends(require_favorites),
    location_id: int = Depends(location_id_param),
    db: AsyncSession = Depends(get_db),
):
    """Add to favorites (idempotent)"""
    favorite = await favorite_manager.add_favorite(db, principal, location_id)
    return FavoriteAddResponse(fav=favorite)


@router.delete("/{location_id}", response_model=FavoriteRemoveResponse)
async def remove_favorite(
    principal: Principal = Depends(require_favorites),
    location_id: int = Depends(location_id_param),
    db: AsyncSession = Depends(get_db),
):
    removed = await favorite_manager.remove_favorite(db, principal, location_id)
    return FavoriteRemoveResponse(removed=removed)
