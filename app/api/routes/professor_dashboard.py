# app/api/routes/professor_dashboard.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import func, desc
from datetime import date

from app.db.base import get_db
from app.db.loaders import load_booking_details
from app.db.models.booking import Booking
from app.db.models.review import Review
from app.db.models.taxonomy import Subject
from app.db.models.user import User
from app.core.enums import BookingStatus, ModerationStatus
from app.core.security import require_professor
from app.schemas.professor_dashboard import ProfessorSummaryResponse, TopSubjectItem

router = APIRouter(prefix="/professor/dashboard", tags=["professor-dashboard"])


@router.get("", response_model=ProfessorSummaryResponse)
def professor_summary(db: Session = Depends(get_db), current_user: User = Depends(require_professor)):
    professor_id = current_user.id
    mine = db.query(Booking).filter(Booking.professor_id == professor_id)

    # By status
    counts = {s: 0 for s in BookingStatus}
    rows = (
        db.query(Booking.status, func.count(Booking.id))
        .filter(Booking.professor_id == professor_id)
        .group_by(Booking.status)
        .all()
    )
    for status_value, cnt in rows:
        counts[BookingStatus(status_value)] = int(cnt)

    # Earnings - sum only completed bookings
    earned = (Booking.professor_id == professor_id, Booking.status == BookingStatus.COMPLETED)
    total_earnings = db.query(func.coalesce(func.sum(Booking.total_price), 0)).filter(*earned).scalar() or 0.0

    # Current month earnings, by session date
    month_start = date.today().replace(day=1)
    current_month_earnings = db.query(func.coalesce(func.sum(Booking.total_price), 0)).filter(
        *earned, Booking.date >= month_start
    ).scalar() or 0.0

    # Average rating from non-rejected reviews
    review_filter = (Review.professor_id == professor_id, Review.moderation_status != ModerationStatus.REJECTED)
    avg_rating = db.query(func.avg(Review.rating)).filter(*review_filter).scalar()
    avg_rating = round(float(avg_rating), 2) if avg_rating is not None else None
    total_reviews = db.query(func.count(Review.id)).filter(*review_filter).scalar() or 0

    # Top subject by number of bookings
    top_q = (
        db.query(Booking.subject_id, func.count(Booking.id).label("cnt"))
        .filter(Booking.professor_id == professor_id)
        .group_by(Booking.subject_id)
        .order_by(desc("cnt"))
        .limit(1)
        .all()
    )
    top_subject = None
    if top_q:
        subject_id, cnt = top_q[0]
        subject = db.query(Subject).filter(Subject.id == subject_id).first()
        if subject:
            top_subject = TopSubjectItem(subject_id=subject.id, subject_name=subject.name, count=int(cnt))

    upcoming = load_booking_details(
        mine.filter(
            Booking.status.in_([BookingStatus.PENDING, BookingStatus.CONFIRMED]),
            Booking.date >= date.today(),
        )
        .order_by(Booking.date.asc(), Booking.start_time.asc())
        .limit(5)
    )

    return ProfessorSummaryResponse(
        total_bookings=sum(counts.values()),
        pending=counts[BookingStatus.PENDING],
        confirmed=counts[BookingStatus.CONFIRMED],
        completed=counts[BookingStatus.COMPLETED],
        cancelled=counts[BookingStatus.CANCELLED],
        total_earnings=float(total_earnings),
        current_month_earnings=float(current_month_earnings),
        average_rating=avg_rating,
        total_reviews=int(total_reviews),
        top_subject=top_subject,
        upcoming_bookings=upcoming,
    )
