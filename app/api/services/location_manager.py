"""
Location management service

Owner submissions and self-service edits, admin moderation, public reads.
Every mutation runs in the request's session and commits once, so relation
replacement, status change and its audit row land together or not at all.
"""

from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from config.constants import ADMIN_PAGE_SIZE, OWNER_PAGE_SIZE, PUBLIC_PAGE_SIZE
from app.api.schemas import (
    ContactResponse,
    LocationCreateRequest,
    LocationListResponse,
    LocationUpdateRequest,
    ManagedLocationInfo,
    ManagedLocationListResponse,
    RatedLocationInfo,
    StatusHistoryResponse,
)
from app.api.services import moderation, validators, views
from app.api.services.catalog import get_or_create_fish, resolve_seasons
from app.api.services.location_query import (
    LocationFilters,
    load_location,
    rating_summaries,
    search_locations,
    NO_REVIEWS,
)
from app.api.services.moderation import ModerationAction
from app.core.error_handling import NotFoundError, storage_errors
from app.core.logger import get_logger, get_logger_instance
from app.core.security import Principal
from app.models import (
    Location,
    LocationFish,
    LocationSeason,
    LocationStatus,
    LocationStatusChange,
    Photo,
    utcnow,
)

# scalar request field -> validator
SCALAR_VALIDATORS = {
    "title": validators.validate_title,
    "description": validators.validate_description,
    "region": validators.require_region,
    "water_type": validators.validate_water_type,
    "lat": validators.validate_latitude,
    "lng": validators.validate_longitude,
    "contact_info": validators.normalize_contact_info,
}

# list request field -> cleaner (full replacement of the relation)
RELATION_CLEANERS = {
    "photo_urls": validators.validate_photo_urls,
    "fish_names": validators.validate_fish_names,
    "season_codes": validators.clean_strings,
}


class LocationManager:
    """Location lifecycle and moderation"""

    def __init__(self):
        self.logger = get_logger(__name__)

    # ========== owner: create ==========

    @storage_errors("create location")
    async def create_location(
        self, db: AsyncSession, principal: Principal, request: LocationCreateRequest
    ) -> ManagedLocationInfo:
        """New location from an owner; always starts PENDING"""
        values = {
            name: check(getattr(request, name)) for name, check in SCALAR_VALIDATORS.items()
        }
        photo_urls = validators.validate_photo_urls(request.photo_urls)
        fish_names = validators.validate_fish_names(request.fish_names)
        season_codes = validators.clean_strings(request.season_codes)

        location = Location(owner_id=principal.id, status=moderation.initial_status(), **values)
        db.add(location)
        await db.flush()

        await self._replace_photos(db, location.id, photo_urls)
        await self._replace_fish(db, location.id, fish_names)
        await self._replace_seasons(db, location.id, season_codes)
        self._record_status_change(
            db, location, None, location.status, ModerationAction.CREATE, principal
        )

        await db.commit()
        self.logger.info(f"Location {location.id} created by owner {principal.id}")

        created = await load_location(db, location.id, refresh=True)
        return views.managed_location_info(created)

    # ========== owner: self-service ==========

    @storage_errors("update location")
    async def update_owner_location(
        self,
        db: AsyncSession,
        principal: Principal,
        location_id: int,
        request: LocationUpdateRequest,
    ) -> ManagedLocationInfo:
        """
        Partial update of an owned location.

        Scalar fields present in the request are validated and set; list fields
        present replace the whole relation. Editing an APPROVED location sends
        it back to PENDING in the same transaction.
        """
        present = request.model_fields_set

        # validate everything before touching storage
        scalar_changes = {}
        for name, check in SCALAR_VALIDATORS.items():
            if name in present:
                scalar_changes[name] = check(getattr(request, name))

        relation_changes = {}
        for name, clean in RELATION_CLEANERS.items():
            value = getattr(request, name)
            if name in present and value is not None:
                relation_changes[name] = clean(value)

        location = await self._get_owned(db, principal, location_id)

        if not scalar_changes and not relation_changes:
            return views.managed_location_info(
                await load_location(db, location.id, refresh=True)
            )

        for name, value in scalar_changes.items():
            setattr(location, name, value)

        if "photo_urls" in relation_changes:
            await self._replace_photos(db, location.id, relation_changes["photo_urls"])
        if "fish_names" in relation_changes:
            await self._replace_fish(db, location.id, relation_changes["fish_names"])
        if "season_codes" in relation_changes:
            await self._replace_seasons(db, location.id, relation_changes["season_codes"])

        self._transition(
            db,
            location,
            moderation.status_after_owner_edit(location.status),
            ModerationAction.OWNER_EDIT,
            principal,
        )
        location.updated_at = utcnow()

        await db.commit()
        self.logger.info(
            f"Location {location.id} updated by owner {principal.id} "
            f"(fields: {', '.join(sorted(list(scalar_changes) + list(relation_changes)))})"
        )

        updated = await load_location(db, location.id, refresh=True)
        return views.managed_location_info(updated)

    @storage_errors("hide location")
    async def hide_owner_location(
        self, db: AsyncSession, principal: Principal, location_id: int
    ) -> ManagedLocationInfo:
        location = await self._get_owned(db, principal, location_id)
        self._transition(
            db,
            location,
            moderation.status_after_owner_hide(location.status),
            ModerationAction.OWNER_HIDE,
            principal,
        )
        await db.commit()
        return views.managed_location_info(await load_location(db, location.id, refresh=True))

    @storage_errors("unhide location")
    async def unhide_owner_location(
        self, db: AsyncSession, principal: Principal, location_id: int
    ) -> ManagedLocationInfo:
        location = await self._get_owned(db, principal, location_id)
        self._transition(
            db,
            location,
            moderation.status_after_owner_unhide(location.status),
            ModerationAction.OWNER_UNHIDE,
            principal,
        )
        await db.commit()
        return views.managed_location_info(await load_location(db, location.id, refresh=True))

    async def get_owner_location(
        self, db: AsyncSession, principal: Principal, location_id: int
    ) -> ManagedLocationInfo:
        location = await load_location(db, location_id, Location.owner_id == principal.id)
        if location is None:
            raise NotFoundError("Not found", resource="location")
        return views.managed_location_info(location)

    async def list_owner_locations(
        self,
        db: AsyncSession,
        principal: Principal,
        status: Optional[str] = None,
        page: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> ManagedLocationListResponse:
        filters = LocationFilters(
            owner_id=principal.id, status=validators.parse_optional_status(status)
        )
        return await self._managed_page(db, filters, page, limit, OWNER_PAGE_SIZE)

    # ========== admin: moderation ==========

    @storage_errors("set location status")
    async def set_status(
        self, db: AsyncSession, principal: Principal, location_id: int, status: Optional[str]
    ) -> ManagedLocationInfo:
        """Unified admin status change (APPROVED / REJECTED / HIDDEN)"""
        target = validators.parse_status(status, moderation.ADMIN_SETTABLE_STATUSES)

        location = await db.get(Location, location_id)
        if location is None:
            raise NotFoundError("Location not found", resource="location")

        new_status = moderation.admin_target_status(location.status, target)
        if new_status is not None:
            self._transition(db, location, new_status, ModerationAction.ADMIN_SET_STATUS, principal)
            await db.commit()

        updated = await load_location(db, location.id, refresh=True)
        return views.managed_location_info(updated, with_owner_email=True)

    @storage_errors("delete location")
    async def delete_location(
        self, db: AsyncSession, principal: Principal, location_id: int
    ) -> None:
        """Admin delete, allowed only from a deletable status"""
        location = await db.get(Location, location_id)
        if location is None:
            raise NotFoundError("Location not found", resource="location")

        moderation.ensure_deletable(location.status)

        await db.delete(location)
        await db.commit()
        self.logger.info(
            f"Location {location_id} deleted by admin {principal.id} (status {location.status.value})"
        )

    async def get_admin_location(self, db: AsyncSession, location_id: int) -> ManagedLocationInfo:
        location = await load_location(db, location_id)
        if location is None:
            raise NotFoundError("Location not found", resource="location")
        return views.managed_location_info(location, with_owner_email=True)

    async def list_admin_locations(
        self,
        db: AsyncSession,
        status: Optional[str] = None,
        page: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> ManagedLocationListResponse:
        filters = LocationFilters(status=validators.parse_optional_status(status))
        return await self._managed_page(
            db, filters, page, limit, ADMIN_PAGE_SIZE, with_owner_email=True
        )

    async def status_history(self, db: AsyncSession, location_id: int) -> StatusHistoryResponse:
        if await db.get(Location, location_id) is None:
            raise NotFoundError("Location not found", resource="location")
        result = await db.execute(
            select(LocationStatusChange)
            .where(LocationStatusChange.location_id == location_id)
            .order_by(LocationStatusChange.id)
        )
        items = [views.status_change_info(change) for change in result.scalars()]
        return StatusHistoryResponse(items=items, total=len(items))

    # ========== public ==========

    async def search_public(
        self,
        db: AsyncSession,
        region: Optional[str] = None,
        water_type: Optional[str] = None,
        fish: Optional[str] = None,
        seasons: Optional[str] = None,
        page: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> LocationListResponse:
        """Guest search over APPROVED locations with rating aggregates"""
        filters = LocationFilters.public(
            region=validators.normalize_region(region),
            water_type=str(water_type).strip() if water_type else None,
            fish=validators.split_multi_value(fish),
            seasons=validators.split_multi_value(seasons),
        )
        page, limit, offset = validators.resolve_pagination(page, limit, PUBLIC_PAGE_SIZE)

        locations, total = await search_locations(db, filters, limit, offset)
        ratings = await rating_summaries(db, [loc.id for loc in locations])

        items = [
            views.rated_location_info(loc, ratings.get(loc.id, NO_REVIEWS), photo_limit=1)
            for loc in locations
        ]
        return LocationListResponse(items=items, total=total, page=page, limit=limit)

    async def get_public_location(self, db: AsyncSession, location_id: int) -> RatedLocationInfo:
        location = await load_location(
            db, location_id, Location.status == moderation.PUBLIC_STATUS
        )
        if location is None:
            raise NotFoundError("Location not found", resource="location")
        ratings = await rating_summaries(db, [location.id])
        return views.rated_location_info(location, ratings.get(location.id, NO_REVIEWS))

    async def get_contact(self, db: AsyncSession, location_id: int) -> ContactResponse:
        contact = await db.execute(
            select(Location.contact_info).where(
                Location.id == location_id, Location.status == moderation.PUBLIC_STATUS
            )
        )
        row = contact.first()
        if row is None:
            raise NotFoundError("Location not found", resource="location")
        return ContactResponse(contact_info=row[0])

    # ========== helpers ==========

    async def _get_owned(self, db: AsyncSession, principal: Principal, location_id: int) -> Location:
        """Owned location or 404 (missing and not-yours look the same)"""
        location = await db.scalar(
            select(Location).where(Location.id == location_id, Location.owner_id == principal.id)
        )
        if location is None:
            raise NotFoundError("Not found", resource="location")
        return location

    async def _managed_page(
        self,
        db: AsyncSession,
        filters: LocationFilters,
        page: Optional[int],
        limit: Optional[int],
        page_size,
        with_owner_email: bool = False,
    ) -> ManagedLocationListResponse:
        page, limit, offset = validators.resolve_pagination(page, limit, page_size)
        locations, total = await search_locations(db, filters, limit, offset)
        items = [
            views.managed_location_info(loc, with_owner_email=with_owner_email)
            for loc in locations
        ]
        return ManagedLocationListResponse(items=items, total=total, page=page, limit=limit)

    async def _replace_photos(self, db: AsyncSession, location_id: int, urls: List[str]) -> None:
        await db.execute(delete(Photo).where(Photo.location_id == location_id))
        db.add_all(Photo(location_id=location_id, url=url) for url in urls)
        await db.flush()

    async def _replace_fish(self, db: AsyncSession, location_id: int, names: List[str]) -> None:
        fish_rows = await get_or_create_fish(db, names)
        await db.execute(delete(LocationFish).where(LocationFish.location_id == location_id))
        db.add_all(LocationFish(location_id=location_id, fish_id=fish.id) for fish in fish_rows)
        await db.flush()

    async def _replace_seasons(self, db: AsyncSession, location_id: int, codes: List[str]) -> None:
        season_rows = await resolve_seasons(db, codes)
        await db.execute(delete(LocationSeason).where(LocationSeason.location_id == location_id))
        db.add_all(
            LocationSeason(location_id=location_id, season_id=season.id) for season in season_rows
        )
        await db.flush()

    def _transition(
        self,
        db: AsyncSession,
        location: Location,
        new_status: LocationStatus,
        action: ModerationAction,
        principal: Principal,
    ) -> None:
        """Apply a status change and its audit row; no-op when unchanged"""
        if new_status == location.status:
            return
        old_status = location.status
        location.status = new_status
        self._record_status_change(db, location, old_status, new_status, action, principal)

    def _record_status_change(
        self,
        db: AsyncSession,
        location: Location,
        from_status: Optional[LocationStatus],
        to_status: LocationStatus,
        action: ModerationAction,
        principal: Principal,
    ) -> None:
        db.add(
            LocationStatusChange(
                location_id=location.id,
                from_status=from_status,
                to_status=to_status,
                action=action.value,
                actor_id=principal.id,
                actor_role=principal.role,
            )
        )
        get_logger_instance().log_status_change(
            location.id,
            from_status.value if from_status else None,
            to_status.value,
            principal.id,
            action.value,
        )
