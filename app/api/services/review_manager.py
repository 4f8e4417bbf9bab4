"""
Review service

One review per user per location, only on APPROVED locations. The uniqueness
rule is enforced by the database constraint; a violation comes back as 409.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from app.api.schemas import ReviewCreateRequest, ReviewInfo, ReviewListResponse
from app.api.services import moderation, validators, views
from app.core.error_handling import AuthorizationError, NotFoundError, storage_errors
from app.core.logger import get_logger
from app.core.security import Principal
from app.models import Location, Review


class ReviewManager:
    """Review creation and listing"""

    def __init__(self):
        self.logger = get_logger(__name__)

    @storage_errors("create review")
    async def create_review(
        self,
        db: AsyncSession,
        principal: Principal,
        location_id: int,
        request: ReviewCreateRequest,
    ) -> ReviewInfo:
        rating = validators.validate_rating(request.rating)
        comment = validators.validate_comment(request.comment)

        location = await db.get(Location, location_id)
        if location is None:
            raise NotFoundError("Location not found", resource="location")
        if not moderation.is_reviewable(location.status):
            raise AuthorizationError("You can review only APPROVED locations")

        review = Review(
            location_id=location_id,
            user_id=principal.id,
            rating=rating,
            comment=comment,
        )
        db.add(review)
        await db.flush()
        await db.commit()

        self.logger.info(
            f"Review {review.id} ({rating}/5) on location {location_id} by user {principal.id}"
        )

        created = await db.scalar(
            select(Review)
            .options(joinedload(Review.user))
            .where(Review.id == review.id)
            .execution_options(populate_existing=True)
        )
        return views.review_info(created)

    async def list_reviews(self, db: AsyncSession, location_id: int) -> ReviewListResponse:
        """All reviews of a location, newest first"""
        result = await db.execute(
            select(Review)
            .options(joinedload(Review.user))
            .where(Review.location_id == location_id)
            .order_by(Review.created_at.desc(), Review.id.desc())
        )
        items = [views.review_info(review) for review in result.scalars()]
        return ReviewListResponse(items=items, total=len(items))
