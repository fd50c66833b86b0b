# app/api/routes/student_dashboard.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import func, desc
from datetime import date

from app.db.base import get_db
from app.db.loaders import load_booking_details
from app.db.models.booking import Booking
from app.db.models.user import User
from app.core.enums import BookingStatus
from app.core.security import require_student
from app.schemas.student_dashboard import (
    FavoriteProfessor,
    StudentDashboardResponse,
    StudentStats,
)

router = APIRouter(prefix="/student/dashboard", tags=["student-dashboard"])


@router.get("", response_model=StudentDashboardResponse)
def student_dashboard(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_student),
):
    student_id = current_user.id
    today = date.today()
    mine = db.query(Booking).filter(Booking.student_id == student_id)

    # --- Stats ---
    upcoming_filter = (Booking.status == BookingStatus.CONFIRMED, Booking.date >= today)
    stats = StudentStats(
        total_bookings=mine.count(),
        upcoming_sessions=mine.filter(*upcoming_filter).count(),
        completed_sessions=mine.filter(Booking.status == BookingStatus.COMPLETED).count(),
        favorite_subjects=len(current_user.preferred_subjects),
    )

    # --- Recent bookings (5) ---
    recent = load_booking_details(mine.order_by(Booking.created_at.desc(), Booking.id.desc()).limit(5))

    # --- Favorite professors: most booked (3) ---
    fav_rows = (
        db.query(User.id, User.name, func.count(Booking.id).label("cnt"))
        .join(Booking, Booking.professor_id == User.id)
        .filter(Booking.student_id == student_id)
        .group_by(User.id, User.name)
        .order_by(desc("cnt"), User.id)
        .limit(3)
        .all()
    )
    favorites = [FavoriteProfessor(id=pid, name=name, booking_count=int(cnt)) for pid, name, cnt in fav_rows]

    # --- Next confirmed sessions (3) ---
    upcoming = load_booking_details(
        mine.filter(*upcoming_filter).order_by(Booking.date.asc(), Booking.start_time.asc()).limit(3)
    )

    return StudentDashboardResponse(
        stats=stats,
        recent_bookings=recent,
        favorite_professors=favorites,
        upcoming_sessions=upcoming,
    )
