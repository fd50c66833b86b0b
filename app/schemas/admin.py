# app/schemas/admin.py
from pydantic import BaseModel, Field
from typing import Dict, Literal, Optional

from app.core.enums import BookingStatus
from app.schemas.booking import BookingResponse
from app.schemas.common import ActionResponse
from app.schemas.feedback import FeedbackResponse
from app.schemas.review import ReviewResponse


class BookingStatusUpdate(BaseModel):
    status: BookingStatus
    notes: Optional[str] = Field(default=None, max_length=500)


class PaymentStatusUpdate(BaseModel):
    # "failed" is not settable from the back office
    payment_status: Literal["pending", "paid", "refunded"]
    transaction_id: Optional[str] = Field(default=None, max_length=255)
    notes: Optional[str] = Field(default=None, max_length=500)


class BookingAdminActionResponse(ActionResponse):
    booking: Optional[BookingResponse] = None


class ReviewAdminActionResponse(ActionResponse):
    review: Optional[ReviewResponse] = None


class FeedbackAdminActionResponse(ActionResponse):
    feedback: Optional[FeedbackResponse] = None


class BookingStats(BaseModel):
    total_bookings: int
    by_status: Dict[str, int]
    by_payment_status: Dict[str, int]
    total_revenue: float
    average_price: float
    average_duration: float
