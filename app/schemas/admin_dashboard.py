# app/schemas/admin_dashboard.py
from pydantic import BaseModel
from typing import Dict, List, Optional
from datetime import date


class KPIItem(BaseModel):
    total_users: int
    total_professors: int
    total_students: int
    total_parents: int
    total_bookings: int
    bookings_today: int
    bookings_last_7_days: int

    class Config:
        from_attributes = True


class ProfessorEarningsItem(BaseModel):
    professor_id: int
    professor_name: Optional[str]
    total_earnings: float
    completed_bookings: int

    class Config:
        from_attributes = True


class SubjectEarningsItem(BaseModel):
    subject_id: int
    subject_name: Optional[str]
    total_earnings: float

    class Config:
        from_attributes = True


class TrendPoint(BaseModel):
    day: date
    bookings: int
    earnings: float


class AdminDashboardResponse(BaseModel):
    kpis: KPIItem
    bookings_by_status: Dict[str, int]
    total_revenue: float
    top_professors_by_earnings: List[ProfessorEarningsItem]
    earnings_by_subject: List[SubjectEarningsItem]
    bookings_trend_last_30_days: List[TrendPoint]
