# app/api/routes/admin_dashboard.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import func, desc
from datetime import datetime, timedelta

from app.db.base import get_db
from app.db.models.user import Role, User
from app.db.models.booking import Booking
from app.db.models.taxonomy import Subject
from app.core.enums import BookingStatus, RoleSlug
from app.schemas.admin_dashboard import (
    AdminDashboardResponse,
    KPIItem,
    ProfessorEarningsItem,
    SubjectEarningsItem,
    TrendPoint,
)
from app.core.security import require_admin

router = APIRouter(prefix="/admin/analytics", tags=["admin-analytics"])


def _count_with_role(db: Session, slug: RoleSlug) -> int:
    return db.query(func.count(User.id)).filter(User.roles.any(Role.slug == slug.value)).scalar() or 0


@router.get("", response_model=AdminDashboardResponse)
def admin_analytics(db: Session = Depends(get_db), current_user: User = Depends(require_admin)):
    now = datetime.utcnow()
    today = now.date()
    start_of_today = datetime.combine(today, datetime.min.time())
    last_7 = now - timedelta(days=7)
    completed = Booking.status == BookingStatus.COMPLETED

    # KPIs
    total_users = db.query(func.count(User.id)).scalar() or 0
    total_bookings = db.query(func.count(Booking.id)).scalar() or 0
    bookings_today = db.query(func.count(Booking.id)).filter(Booking.created_at >= start_of_today).scalar() or 0
    bookings_last_7_days = db.query(func.count(Booking.id)).filter(Booking.created_at >= last_7).scalar() or 0

    kpis = KPIItem(
        total_users=int(total_users),
        total_professors=int(_count_with_role(db, RoleSlug.PROFESSOR)),
        total_students=int(_count_with_role(db, RoleSlug.STUDENT)),
        total_parents=int(_count_with_role(db, RoleSlug.PARENT)),
        total_bookings=int(total_bookings),
        bookings_today=int(bookings_today),
        bookings_last_7_days=int(bookings_last_7_days),
    )

    # bookings by status, every status present even at zero
    bookings_by_status = {s.value: 0 for s in BookingStatus}
    for status_value, count in db.query(Booking.status, func.count(Booking.id)).group_by(Booking.status).all():
        bookings_by_status[BookingStatus(status_value).value] = int(count)

    total_revenue = db.query(func.coalesce(func.sum(Booking.total_price), 0)).filter(completed).scalar() or 0.0

    # top professors by earnings (completed bookings)
    prof_rows = (
        db.query(
            Booking.professor_id,
            func.coalesce(func.sum(Booking.total_price), 0).label("sum_earn"),
            func.count(Booking.id).label("completed_count"),
        )
        .filter(completed)
        .group_by(Booking.professor_id)
        .order_by(desc("sum_earn"))
        .limit(10)
        .all()
    )
    top_professors = []
    for professor_id, sum_earn, completed_count in prof_rows:
        prof = db.query(User).filter(User.id == professor_id).first()
        top_professors.append(ProfessorEarningsItem(
            professor_id=int(professor_id),
            professor_name=prof.name if prof else None,
            total_earnings=float(sum_earn or 0.0),
            completed_bookings=int(completed_count or 0),
        ))

    # earnings by subject
    subject_rows = (
        db.query(
            Booking.subject_id,
            Subject.name,
            func.coalesce(func.sum(Booking.total_price), 0).label("sum_earn"),
        )
        .outerjoin(Subject, Booking.subject_id == Subject.id)
        .filter(completed)
        .group_by(Booking.subject_id, Subject.name)
        .order_by(desc("sum_earn"))
        .limit(20)
        .all()
    )
    earnings_by_subject = [
        SubjectEarningsItem(subject_id=int(subject_id), subject_name=name, total_earnings=float(sum_earn or 0.0))
        for subject_id, name, sum_earn in subject_rows
    ]

    # bookings & earnings trend last 30 days
    trend = []
    for i in range(29, -1, -1):
        d = (now - timedelta(days=i)).date()
        day_start = datetime.combine(d, datetime.min.time())
        day_end = datetime.combine(d, datetime.max.time())
        in_day = (Booking.created_at >= day_start, Booking.created_at <= day_end)
        bookings_count = db.query(func.count(Booking.id)).filter(*in_day).scalar() or 0
        earnings_sum = db.query(func.coalesce(func.sum(Booking.total_price), 0)).filter(completed, *in_day).scalar() or 0.0
        trend.append(TrendPoint(day=d, bookings=int(bookings_count), earnings=float(earnings_sum)))

    return AdminDashboardResponse(
        kpis=kpis,
        bookings_by_status=bookings_by_status,
        total_revenue=float(total_revenue),
        top_professors_by_earnings=top_professors,
        earnings_by_subject=earnings_by_subject,
        bookings_trend_last_30_days=trend,
    )
