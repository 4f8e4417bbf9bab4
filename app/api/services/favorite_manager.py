"""
Favorite service

Idempotent add (insert, ignore duplicate), remove reporting whether a row was
deleted, and a paginated list of favorited locations.
"""

import math
from typing import Optional

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from config.constants import FAVORITES_PAGE_SIZE
from app.api.schemas import FavoriteInfo, FavoriteListResponse
from app.api.services import validators, views
from app.api.services.catalog import dialect_insert
from app.api.services.location_query import LOCATION_LOAD_OPTIONS
from app.core.error_handling import NotFoundError, storage_errors
from app.core.logger import get_logger
from app.core.security import Principal
from app.models import Favorite, Location


class FavoriteManager:
    """Per-user favorites"""

    def __init__(self):
        self.logger = get_logger(__name__)

    @storage_errors("add favorite")
    async def add_favorite(
        self, db: AsyncSession, principal: Principal, location_id: int
    ) -> FavoriteInfo:
        if await db.get(Location, location_id) is None:
            raise NotFoundError("Location not found", resource="location")

        insert = dialect_insert(db)
        result = await db.execute(
            insert(Favorite)
            .values(user_id=principal.id, location_id=location_id)
            .on_conflict_do_nothing(index_elements=["user_id", "location_id"])
        )
        await db.commit()

        if result.rowcount:
            self.logger.info(f"User {principal.id} added location {location_id} to favorites")

        favorite = await db.scalar(
            select(Favorite).where(
                Favorite.user_id == principal.id, Favorite.location_id == location_id
            )
        )
        return views.favorite_info(favorite)

    @storage_errors("remove favorite")
    async def remove_favorite(
        self, db: AsyncSession, principal: Principal, location_id: int
    ) -> bool:
        result = await db.execute(
            delete(Favorite).where(
                Favorite.user_id == principal.id, Favorite.location_id == location_id
            )
        )
        await db.commit()

        removed = (result.rowcount or 0) > 0
        if removed:
            self.logger.info(f"User {principal.id} removed location {location_id} from favorites")
        return removed

    async def list_favorites(
        self,
        db: AsyncSession,
        principal: Principal,
        page: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> FavoriteListResponse:
        """Favorited locations, most recently favorited first"""
        page, limit, offset = validators.resolve_pagination(page, limit, FAVORITES_PAGE_SIZE)

        total = await db.scalar(
            select(func.count()).select_from(Favorite).where(Favorite.user_id == principal.id)
        )
        result = await db.execute(
            select(Location)
            .join(Favorite, Favorite.location_id == Location.id)
            .where(Favorite.user_id == principal.id)
            .options(*LOCATION_LOAD_OPTIONS)
            .order_by(Favorite.created_at.desc(), Favorite.id.desc())
            .offset(offset)
            .limit(limit)
        )
        items = [views.location_info(loc) for loc in result.unique().scalars()]
        total = int(total or 0)

        return FavoriteListResponse(
            items=items,
            total=total,
            page=page,
            limit=limit,
            pages=math.ceil(total / limit),
        )
