# app/schemas/parent_dashboard.py
from pydantic import BaseModel
from typing import List, Optional

from app.schemas.booking import BookingDetail


class ParentStats(BaseModel):
    total_children: int
    active_bookings: int
    completed_sessions: int
    total_spent: float


class ChildOverview(BaseModel):
    id: int
    name: str
    grade: Optional[str] = None
    age: Optional[int] = None
    subjects: List[str]


class ParentDashboardResponse(BaseModel):
    stats: ParentStats
    children: List[ChildOverview]
    upcoming_sessions: List[BookingDetail]
    recent_bookings: List[BookingDetail]
