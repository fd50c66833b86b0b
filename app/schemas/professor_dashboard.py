# app/schemas/professor_dashboard.py
from pydantic import BaseModel
from typing import List, Optional

from app.schemas.booking import BookingDetail


class TopSubjectItem(BaseModel):
    subject_id: int
    subject_name: str
    count: int


class ProfessorSummaryResponse(BaseModel):
    total_bookings: int
    pending: int
    confirmed: int
    completed: int
    cancelled: int
    total_earnings: float
    current_month_earnings: float
    average_rating: Optional[float]
    total_reviews: int
    top_subject: Optional[TopSubjectItem] = None
    upcoming_bookings: List[BookingDetail]
