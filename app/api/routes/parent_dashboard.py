# app/api/routes/parent_dashboard.py
from collections import defaultdict
from datetime import date

from fastapi import APIRouter, Depends
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.db.base import get_db
from app.db.loaders import load_booking_details
from app.db.models.booking import Booking
from app.db.models.child import Child
from app.db.models.taxonomy import Subject
from app.db.models.user import User
from app.core.enums import BookingStatus, PaymentStatus
from app.core.security import require_parent
from app.schemas.parent_dashboard import ChildOverview, ParentDashboardResponse, ParentStats

router = APIRouter(prefix="/parent/dashboard", tags=["parent-dashboard"])


@router.get("", response_model=ParentDashboardResponse)
def parent_dashboard(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_parent),
):
    parent_id = current_user.id
    today = date.today()
    mine = db.query(Booking).filter(Booking.parent_id == parent_id)

    children = db.query(Child).filter(Child.parent_id == parent_id).order_by(Child.name).all()

    # --- Subjects each child has been booked for ---
    subject_rows = (
        db.query(Booking.child_id, Subject.name)
        .join(Subject, Subject.id == Booking.subject_id)
        .filter(Booking.parent_id == parent_id, Booking.child_id.isnot(None))
        .distinct()
        .order_by(Subject.name)
        .all()
    )
    subjects_by_child = defaultdict(list)
    for child_id, subject_name in subject_rows:
        subjects_by_child[child_id].append(subject_name)

    # --- Stats ---
    total_spent = (
        db.query(func.coalesce(func.sum(Booking.total_price), 0.0))
        .filter(Booking.parent_id == parent_id, Booking.payment_status == PaymentStatus.PAID)
        .scalar()
    )
    stats = ParentStats(
        total_children=len(children),
        active_bookings=mine.filter(
            Booking.status.in_([BookingStatus.PENDING, BookingStatus.CONFIRMED])
        ).count(),
        completed_sessions=mine.filter(Booking.status == BookingStatus.COMPLETED).count(),
        total_spent=float(total_spent),
    )

    # --- Next confirmed sessions (5) ---
    upcoming = load_booking_details(
        mine.filter(Booking.status == BookingStatus.CONFIRMED, Booking.date >= today)
        .order_by(Booking.date.asc(), Booking.start_time.asc())
        .limit(5)
    )

    # --- Recent bookings (10) ---
    recent = load_booking_details(mine.order_by(Booking.created_at.desc(), Booking.id.desc()).limit(10))

    return ParentDashboardResponse(
        stats=stats,
        children=[
            ChildOverview(
                id=child.id,
                name=child.name,
                grade=child.grade,
                age=child.age,
                subjects=subjects_by_child.get(child.id, []),
            )
            for child in children
        ],
        upcoming_sessions=upcoming,
        recent_bookings=recent,
    )
