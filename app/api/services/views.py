"""
ORM -> response schema conversion
"""

from typing import Optional

from app.api.schemas import (
    FavoriteInfo,
    FishInfo,
    LocationInfo,
    ManagedLocationInfo,
    OwnerInfo,
    PhotoInfo,
    RatedLocationInfo,
    ReviewInfo,
    SeasonInfo,
    StatusChangeInfo,
    UserInfo,
    UserPublic,
)
from app.api.services.location_query import NO_REVIEWS, RatingSummary
from app.models import Favorite, Location, LocationStatusChange, Review, User


def user_info(user: User) -> UserInfo:
    return UserInfo(
        id=user.id,
        email=user.email,
        role=user.role,
        display_name=user.display_name,
        created_at=user.created_at,
    )


def _location_fields(
    location: Location, photo_limit: Optional[int] = None, with_owner_email: bool = False
) -> dict:
    photos = location.photos if photo_limit is None else location.photos[:photo_limit]
    return dict(
        id=location.id,
        title=location.title,
        description=location.description,
        region=location.region,
        water_type=location.water_type,
        lat=location.lat,
        lng=location.lng,
        status=location.status,
        created_at=location.created_at,
        owner=OwnerInfo(
            id=location.owner.id,
            display_name=location.owner.display_name,
            email=location.owner.email if with_owner_email else None,
        ),
        fish=[FishInfo(id=link.fish.id, name=link.fish.name) for link in location.fish_links],
        seasons=[
            SeasonInfo(id=link.season.id, code=link.season.code, name=link.season.name)
            for link in location.season_links
        ],
        photos=[PhotoInfo(id=p.id, url=p.url, created_at=p.created_at) for p in photos],
    )


def location_info(location: Location) -> LocationInfo:
    return LocationInfo(**_location_fields(location))


def rated_location_info(
    location: Location, rating: RatingSummary = NO_REVIEWS, photo_limit: Optional[int] = None
) -> RatedLocationInfo:
    return RatedLocationInfo(
        **_location_fields(location, photo_limit=photo_limit),
        avg_rating=rating.avg_rating,
        reviews_count=rating.reviews_count,
    )


def managed_location_info(location: Location, with_owner_email: bool = False) -> ManagedLocationInfo:
    return ManagedLocationInfo(
        **_location_fields(location, with_owner_email=with_owner_email),
        contact_info=location.contact_info,
        updated_at=location.updated_at,
    )


def review_info(review: Review) -> ReviewInfo:
    return ReviewInfo(
        id=review.id,
        location_id=review.location_id,
        rating=review.rating,
        comment=review.comment,
        created_at=review.created_at,
        user=UserPublic(id=review.user.id, display_name=review.user.display_name),
    )


def favorite_info(favorite: Favorite) -> FavoriteInfo:
    return FavoriteInfo(
        id=favorite.id,
        user_id=favorite.user_id,
        location_id=favorite.location_id,
        created_at=favorite.created_at,
    )


def status_change_info(change: LocationStatusChange) -> StatusChangeInfo:
    return StatusChangeInfo(
        id=change.id,
        location_id=change.location_id,
        from_status=change.from_status,
        to_status=change.to_status,
        action=change.action,
        actor_id=change.actor_id,
        actor_role=change.actor_role,
        created_at=change.created_at,
    )
