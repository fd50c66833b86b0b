# app/schemas/student_dashboard.py
from pydantic import BaseModel
from typing import List

from app.schemas.booking import BookingDetail
from app.schemas.common import SimpleUser


class StudentStats(BaseModel):
    total_bookings: int
    upcoming_sessions: int
    completed_sessions: int
    favorite_subjects: int


class FavoriteProfessor(SimpleUser):
    booking_count: int


class StudentDashboardResponse(BaseModel):
    stats: StudentStats
    recent_bookings: List[BookingDetail]
    favorite_professors: List[FavoriteProfessor]
    upcoming_sessions: List[BookingDetail]
