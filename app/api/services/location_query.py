"""
Location search/filter query engine

Builds filtered, paginated location listings. Filters combine with AND;
multi-valued filters (fish, seasons) match when the location has at least one
of the requested values. Ratings are aggregated in a second query limited to
the ids on the returned page.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload, selectinload

from app.api.services import moderation
from app.models import (
    Fish,
    Location,
    LocationFish,
    LocationSeason,
    LocationStatus,
    Review,
    Season,
)

# relations every location view needs, loaded up front (no lazy IO under asyncio)
LOCATION_LOAD_OPTIONS = (
    joinedload(Location.owner),
    selectinload(Location.fish_links).joinedload(LocationFish.fish),
    selectinload(Location.season_links).joinedload(LocationSeason.season),
    selectinload(Location.photos),
)


@dataclass
class LocationFilters:
    """Optional filter dimensions; None / empty means 'not filtered'"""

    region: Optional[str] = None
    water_type: Optional[str] = None
    fish: List[str] = field(default_factory=list)
    seasons: List[str] = field(default_factory=list)
    status: Optional[LocationStatus] = None
    owner_id: Optional[int] = None

    @classmethod
    def public(cls, **kwargs) -> "LocationFilters":
        """Guest search: APPROVED only"""
        return cls(status=moderation.PUBLIC_STATUS, **kwargs)

    def conditions(self) -> list:
        conditions = []
        if self.status is not None:
            conditions.append(Location.status == self.status)
        if self.owner_id is not None:
            conditions.append(Location.owner_id == self.owner_id)
        if self.region:
            conditions.append(Location.region == self.region)
        if self.water_type:
            conditions.append(Location.water_type == self.water_type)
        if self.fish:
            conditions.append(
                Location.fish_links.any(LocationFish.fish.has(Fish.name.in_(self.fish)))
            )
        if self.seasons:
            conditions.append(
                Location.season_links.any(LocationSeason.season.has(Season.code.in_(self.seasons)))
            )
        return conditions


@dataclass(frozen=True)
class RatingSummary:
    avg_rating: Optional[float] = None
    reviews_count: int = 0


NO_REVIEWS = RatingSummary()


async def search_locations(
    db: AsyncSession, filters: LocationFilters, limit: int, offset: int
) -> Tuple[List[Location], int]:
    """One page of matching locations (newest first) and the total match count"""
    conditions = filters.conditions()

    total = await db.scalar(
        select(func.count()).select_from(Location).where(*conditions)
    )

    result = await db.execute(
        select(Location)
        .where(*conditions)
        .options(*LOCATION_LOAD_OPTIONS)
        .order_by(Location.created_at.desc(), Location.id.desc())
        .offset(offset)
        .limit(limit)
    )
    return list(result.unique().scalars()), int(total or 0)


async def rating_summaries(
    db: AsyncSession, location_ids: Iterable[int]
) -> Dict[int, RatingSummary]:
    """Average rating (2 decimals) and review count for the given locations only"""
    ids = list(location_ids)
    if not ids:
        return {}

    result = await db.execute(
        select(
            Review.location_id,
            func.avg(Review.rating),
            func.count(Review.id),
        )
        .where(Review.location_id.in_(ids))
        .group_by(Review.location_id)
    )

    summaries = {}
    for location_id, avg_rating, count in result:
        summaries[location_id] = RatingSummary(
            avg_rating=round(float(avg_rating), 2) if count else None,
            reviews_count=int(count),
        )
    return summaries


async def load_location(
    db: AsyncSession, location_id: int, *conditions, refresh: bool = False
) -> Optional[Location]:
    """Single location with all view relations, or None"""
    stmt = (
        select(Location)
        .where(Location.id == location_id, *conditions)
        .options(*LOCATION_LOAD_OPTIONS)
    )
    if refresh:
        stmt = stmt.execution_options(populate_existing=True)
    result = await db.execute(stmt)
    return result.unique().scalar_one_or_none()
