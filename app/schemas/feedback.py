# app/schemas/feedback.py
from pydantic import BaseModel, Field, conint
from typing import List, Optional
from datetime import datetime

from app.core.enums import ModerationStatus
from app.schemas.booking import BookingDetail
from app.schemas.common import ActionResponse, PageMeta, SimpleUser
from app.schemas.review import RatingBucket


class FeedbackWrite(BaseModel):
    rating: conint(ge=1, le=5) = Field(..., description="Rating 1-5")
    comment: Optional[str] = Field(default=None, max_length=1000)
    would_recommend: bool = False


class FeedbackResponse(BaseModel):
    id: int
    booking_id: int
    professor_id: int
    student_id: int
    rating: int
    comment: Optional[str]
    would_recommend: bool
    status: ModerationStatus
    admin_response: Optional[str] = None
    is_resolved: bool
    created_at: Optional[datetime]

    class Config:
        from_attributes = True


class FeedbackDetail(FeedbackResponse):
    professor: SimpleUser


class FeedbackActionResponse(ActionResponse):
    feedback: Optional[FeedbackResponse] = None


class FeedbackForm(BaseModel):
    """Create-form payload: either the booking to rate, or a redirect to the existing feedback."""
    booking: Optional[BookingDetail] = None
    redirect_to: Optional[str] = None


class FeedbackPage(PageMeta):
    items: List[FeedbackDetail]


# --- admin ---
class FeedbackRespond(BaseModel):
    admin_response: str = Field(..., min_length=1, max_length=1000)


class FeedbackStats(BaseModel):
    total_feedbacks: int
    resolved_feedbacks: int
    unresolved_feedbacks: int
    average_rating: float
    recommend_rate: float
    rating_distribution: List[RatingBucket]
