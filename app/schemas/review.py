# app/schemas/review.py
from pydantic import BaseModel, Field, conint
from typing import List, Optional
from datetime import datetime

from app.core.enums import ModerationStatus
from app.schemas.common import ActionResponse, PageMeta, SimpleUser


class ReviewWrite(BaseModel):
    """Body of both create and update; only these fields are ever written."""
    rating: conint(ge=1, le=5) = Field(..., description="Rating 1-5")
    title: str = Field(..., min_length=1, max_length=255)
    comment: str = Field(..., min_length=1, max_length=1000)
    would_recommend: bool = False


class ReviewResponse(BaseModel):
    id: int
    professor_id: int
    student_id: int
    rating: int
    title: str
    comment: str
    would_recommend: bool
    moderation_status: ModerationStatus
    is_verified: bool
    is_featured: bool
    created_at: Optional[datetime]

    class Config:
        from_attributes = True


class ReviewDetail(ReviewResponse):
    professor: SimpleUser


class ReviewActionResponse(ActionResponse):
    review: Optional[ReviewResponse] = None


class ReviewPage(PageMeta):
    items: List[ReviewDetail]


# --- admin ---
class ReviewModerate(BaseModel):
    moderation_status: ModerationStatus
    admin_notes: Optional[str] = Field(default=None, max_length=500)


class RatingBucket(BaseModel):
    rating: int
    count: int


class ReviewStats(BaseModel):
    total_reviews: int
    pending_reviews: int
    approved_reviews: int
    rejected_reviews: int
    verified_reviews: int
    featured_reviews: int
    average_rating: float
    rating_distribution: List[RatingBucket]
