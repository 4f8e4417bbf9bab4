"""
API Pydantic schemas

Wire format is camelCase; Python attribute names stay snake_case.
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.models import LocationStatus, UserRole


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ===========================================
# Request schemas
# ===========================================

class RegisterRequest(CamelModel):
    """Registration request"""
    email: str
    password: str
    display_name: Optional[str] = None
    role: Optional[str] = None


class LoginRequest(CamelModel):
    """Login request"""
    email: str
    password: str


class ProfileUpdateRequest(CamelModel):
    display_name: str


class PasswordChangeRequest(CamelModel):
    current_password: str
    new_password: str


class LocationCreateRequest(CamelModel):
    """Owner submission of a new location"""
    title: str
    description: str
    region: str
    water_type: str
    lat: float
    lng: float
    contact_info: Optional[str] = None
    fish_names: List[str] = Field(default_factory=list)
    season_codes: List[str] = Field(default_factory=list)
    photo_urls: List[str] = Field(default_factory=list)


class LocationUpdateRequest(CamelModel):
    """
    Owner partial update

    Only fields present in the request are applied; list fields replace the
    whole relation when present.
    """
    title: Optional[str] = None
    description: Optional[str] = None
    region: Optional[str] = None
    water_type: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    contact_info: Optional[str] = None
    fish_names: Optional[List[str]] = None
    season_codes: Optional[List[str]] = None
    photo_urls: Optional[List[str]] = None


class StatusUpdateRequest(CamelModel):
    """Admin status change; the value is checked against the allowed set by the service"""
    status: str


class ReviewCreateRequest(CamelModel):
    rating: int
    comment: Optional[str] = None


# ===========================================
# Response schemas
# ===========================================

class UserPublic(CamelModel):
    """Public identity of a user"""
    id: int
    display_name: Optional[str] = None


class OwnerInfo(UserPublic):
    email: Optional[str] = None


class UserInfo(CamelModel):
    id: int
    email: str
    role: UserRole
    display_name: Optional[str] = None
    created_at: Optional[datetime] = None


class AuthResponse(CamelModel):
    user: UserInfo
    token: str


class UserResponse(CamelModel):
    user: UserInfo


class FishInfo(CamelModel):
    id: int
    name: str


class SeasonInfo(CamelModel):
    id: int
    code: str
    name: str


class PhotoInfo(CamelModel):
    id: int
    url: str
    created_at: datetime


class LocationInfo(CamelModel):
    """Location as shown to any reader"""
    id: int
    title: str
    description: str
    region: str
    water_type: str
    lat: float
    lng: float
    status: LocationStatus
    created_at: datetime
    owner: OwnerInfo
    fish: List[FishInfo] = Field(default_factory=list)
    seasons: List[SeasonInfo] = Field(default_factory=list)
    photos: List[PhotoInfo] = Field(default_factory=list)


class RatedLocationInfo(LocationInfo):
    """Location with its review aggregate"""
    avg_rating: Optional[float] = None
    reviews_count: int = 0


class ManagedLocationInfo(LocationInfo):
    """Location as shown to its owner or an admin"""
    contact_info: Optional[str] = None
    updated_at: Optional[datetime] = None


class LocationListResponse(CamelModel):
    items: List[RatedLocationInfo]
    total: int
    page: int
    limit: int


class ManagedLocationListResponse(CamelModel):
    items: List[ManagedLocationInfo]
    total: int
    page: int
    limit: int


class FavoriteListResponse(CamelModel):
    items: List[LocationInfo]
    total: int
    page: int
    limit: int
    pages: int


class ContactResponse(CamelModel):
    contact_info: Optional[str] = None


class ReviewInfo(CamelModel):
    id: int
    location_id: int
    rating: int
    comment: str
    created_at: datetime
    user: UserPublic


class ReviewListResponse(CamelModel):
    items: List[ReviewInfo]
    total: int


class FavoriteInfo(CamelModel):
    id: int
    user_id: int
    location_id: int
    created_at: datetime


class FavoriteAddResponse(CamelModel):
    fav: FavoriteInfo


class FavoriteRemoveResponse(CamelModel):
    removed: bool


class OkResponse(CamelModel):
    ok: bool = True


class StatusChangeInfo(CamelModel):
    id: int
    location_id: int
    from_status: Optional[LocationStatus] = None
    to_status: LocationStatus
    action: str
    actor_id: Optional[int] = None
    actor_role: Optional[UserRole] = None
    created_at: datetime


class StatusHistoryResponse(CamelModel):
    items: List[StatusChangeInfo]
    total: int


class FishListResponse(CamelModel):
    items: List[FishInfo]


class SeasonListResponse(CamelModel):
    items: List[SeasonInfo]


class HealthResponse(CamelModel):
    ok: bool = True
    service: str
    version: str
