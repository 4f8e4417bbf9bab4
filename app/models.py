"""
Database model definitions
SQLAlchemy ORM models for users, fishing locations and their relations

Each model docstring records:
- Purpose: what the table stores
- Constraints: uniqueness and cascade rules enforced by the database
"""

import enum
from datetime import datetime, timezone

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ===========================================
# Enum definitions
# ===========================================

class UserRole(str, enum.Enum):
    """User role"""
    USER = "USER"
    OWNER = "OWNER"
    ADMIN = "ADMIN"


class LocationStatus(str, enum.Enum):
    """Location moderation status"""
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    HIDDEN = "HIDDEN"


class WaterType(str, enum.Enum):
    """Kind of water body"""
    LAKE = "LAKE"
    RIVER = "RIVER"
    POND = "POND"
    SEA = "SEA"
    OTHER = "OTHER"


# ===========================================
# Users
# ===========================================

class User(Base):
    """
    User accounts
    Purpose: credentials, public display name and role
    Constraints: email unique (stored lowercased), display_name unique when set
    """
    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("email", name="uq_users_email"),
        UniqueConstraint("display_name", name="uq_users_display_name"),
    )

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(320), nullable=False)
    password_hash = Column(String(255), nullable=False)
    display_name = Column(String(30), nullable=True)
    role = Column(Enum(UserRole, name="user_role"), nullable=False, default=UserRole.USER)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    locations = relationship("Location", back_populates="owner", cascade="all, delete-orphan")
    reviews = relationship("Review", back_populates="user", cascade="all, delete-orphan")
    favorites = relationship("Favorite", back_populates="user", cascade="all, delete-orphan")


# ===========================================
# Locations and their relations
# ===========================================

class Location(Base):
    """
    Fishing locations
    Purpose: owner-submitted spot, visible to guests only while APPROVED
    Constraints: photos, fish/season links, reviews, favorites and status history
    are removed together with the location
    """
    __tablename__ = "locations"
    __table_args__ = (
        CheckConstraint("lat >= -90 AND lat <= 90", name="ck_locations_lat_range"),
        CheckConstraint("lng >= -180 AND lng <= 180", name="ck_locations_lng_range"),
    )

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    region = Column(String(32), nullable=False, index=True)
    water_type = Column(String(16), nullable=False, index=True)
    lat = Column(Float, nullable=False)
    lng = Column(Float, nullable=False)
    contact_info = Column(String(255), nullable=True)
    status = Column(
        Enum(LocationStatus, name="location_status"),
        nullable=False,
        default=LocationStatus.PENDING,
        index=True,
    )
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    owner = relationship("User", back_populates="locations")
    photos = relationship(
        "Photo",
        back_populates="location",
        cascade="all, delete-orphan",
        order_by=lambda: (Photo.created_at.desc(), Photo.id.desc()),
    )
    fish_links = relationship("LocationFish", back_populates="location", cascade="all, delete-orphan")
    season_links = relationship("LocationSeason", back_populates="location", cascade="all, delete-orphan")
    reviews = relationship("Review", back_populates="location", cascade="all, delete-orphan")
    favorites = relationship("Favorite", back_populates="location", cascade="all, delete-orphan")
    status_changes = relationship(
        "LocationStatusChange",
        back_populates="location",
        cascade="all, delete-orphan",
        order_by="LocationStatusChange.id",
    )


class Photo(Base):
    """
    Location photos
    Purpose: externally hosted photo URLs, newest first for previews
    """
    __tablename__ = "photos"

    id = Column(Integer, primary_key=True, index=True)
    location_id = Column(Integer, ForeignKey("locations.id", ondelete="CASCADE"), nullable=False, index=True)
    url = Column(String(2048), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    location = relationship("Location", back_populates="photos")


class Fish(Base):
    """
    Fish species catalog
    Purpose: global tag list, grown on first reference
    Constraints: name unique (case-sensitive)
    """
    __tablename__ = "fish"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, nullable=False, index=True)


class LocationFish(Base):
    """Location <-> Fish join"""
    __tablename__ = "location_fish"

    location_id = Column(Integer, ForeignKey("locations.id", ondelete="CASCADE"), primary_key=True)
    fish_id = Column(Integer, ForeignKey("fish.id", ondelete="CASCADE"), primary_key=True)

    location = relationship("Location", back_populates="fish_links")
    fish = relationship("Fish", lazy="joined")


class Season(Base):
    """
    Season catalog
    Purpose: fixed set (SPRING/SUMMER/AUTUMN/WINTER), seeded, never user-created
    """
    __tablename__ = "seasons"

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String(16), unique=True, nullable=False, index=True)
    name = Column(String(50), nullable=False)


class LocationSeason(Base):
    """Location <-> Season join"""
    __tablename__ = "location_seasons"

    location_id = Column(Integer, ForeignKey("locations.id", ondelete="CASCADE"), primary_key=True)
    season_id = Column(Integer, ForeignKey("seasons.id", ondelete="CASCADE"), primary_key=True)

    location = relationship("Location", back_populates="season_links")
    season = relationship("Season", lazy="joined")


# ===========================================
# Reviews and favorites
# ===========================================

class Review(Base):
    """
    Location reviews
    Purpose: rating (1-5) and comment on an APPROVED location
    Constraints: one review per (user, location)
    """
    __tablename__ = "reviews"
    __table_args__ = (
        UniqueConstraint("user_id", "location_id", name="uq_reviews_user_location"),
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_reviews_rating_range"),
    )

    id = Column(Integer, primary_key=True, index=True)
    location_id = Column(Integer, ForeignKey("locations.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    location = relationship("Location", back_populates="reviews")
    user = relationship("User", back_populates="reviews")


class Favorite(Base):
    """
    User favorites
    Purpose: bookmark of a location
    Constraints: one row per (user, location)
    """
    __tablename__ = "favorites"
    __table_args__ = (
        UniqueConstraint("user_id", "location_id", name="uq_favorites_user_location"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    location_id = Column(Integer, ForeignKey("locations.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    user = relationship("User", back_populates="favorites")
    location = relationship("Location", back_populates="favorites")


# ===========================================
# Moderation audit
# ===========================================

class LocationStatusChange(Base):
    """
    Moderation history
    Purpose: one row per status change, written in the same transaction
    """
    __tablename__ = "location_status_changes"

    id = Column(Integer, primary_key=True, index=True)
    location_id = Column(Integer, ForeignKey("locations.id", ondelete="CASCADE"), nullable=False, index=True)
    from_status = Column(Enum(LocationStatus, name="location_status"), nullable=True)
    to_status = Column(Enum(LocationStatus, name="location_status"), nullable=False)
    action = Column(String(32), nullable=False)
    actor_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    actor_role = Column(Enum(UserRole, name="user_role"), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    location = relationship("Location", back_populates="status_changes")
