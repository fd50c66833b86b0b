# app/api/routes/professor_bookings.py
from datetime import date, datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.enums import BookingStatus, CancelledBy
from app.core.exceptions import AuthorizationError, BusinessRuleError
from app.core.logging_utils import log_business_event
from app.core.security import require_professor
from app.db.base import get_db
from app.db.loaders import get_booking_or_404, load_booking_detail, load_booking_details
from app.db.models.booking import Booking
from app.db.models.user import User
from app.schemas.booking import (
    BookingActionResponse,
    BookingDetail,
    BookingPage,
    BookingResponse,
    ProfessorCancel,
)
from app.schemas.common import Flash
from app.services import booking_lifecycle

router = APIRouter(prefix="/professor/bookings", tags=["professor-bookings"])


def _get_own_booking(db: Session, booking_id: int, professor: User) -> Booking:
    booking = get_booking_or_404(db, booking_id)
    if booking.professor_id != professor.id:
        raise AuthorizationError("Vous n'avez pas accès à cette réservation.")
    return booking


def _action(booking: Booking, message: str) -> BookingActionResponse:
    return BookingActionResponse(
        flash=Flash(success=message),
        redirect_to=f"/professor/bookings/{booking.id}",
        booking=BookingResponse.model_validate(booking),
    )


# Professor views their bookings

@router.get("", response_model=BookingPage)
def my_bookings(
    status: Optional[BookingStatus] = Query(None),
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    page: int = Query(1, ge=1),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_professor),
):
    query = db.query(Booking).filter(Booking.professor_id == current_user.id)
    if status is not None:
        query = query.filter(Booking.status == status)
    if date_from is not None:
        query = query.filter(Booking.date >= date_from)
    if date_to is not None:
        query = query.filter(Booking.date <= date_to)

    per_page = settings.list_page_size
    total = query.count()
    items = load_booking_details(
        query.order_by(Booking.date.desc(), Booking.start_time.desc(), Booking.id.desc())
        .offset((page - 1) * per_page)
        .limit(per_page)
    )
    return BookingPage(total=total, page=page, per_page=per_page, items=items)


@router.get("/{booking_id}", response_model=BookingDetail)
def show_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_professor),
):
    _get_own_booking(db, booking_id, current_user)
    return load_booking_detail(db, booking_id)


# Professor confirms booking

@router.post("/{booking_id}/confirm", response_model=BookingActionResponse)
def confirm_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_professor),
):
    booking = _get_own_booking(db, booking_id, current_user)

    if booking.status != BookingStatus.PENDING:
        raise BusinessRuleError("Cette réservation ne peut pas être confirmée.")

    booking.status = BookingStatus.CONFIRMED
    booking.confirmed_at = datetime.utcnow()
    db.commit()
    db.refresh(booking)

    log_business_event("booking_confirmed", "booking", booking.id, current_user.id)
    return _action(booking, "Réservation confirmée avec succès.")


# Professor completes booking

@router.post("/{booking_id}/complete", response_model=BookingActionResponse)
def complete_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_professor),
):
    booking = _get_own_booking(db, booking_id, current_user)

    if booking.status != BookingStatus.CONFIRMED:
        raise BusinessRuleError("Seules les réservations confirmées peuvent être marquées comme terminées.")

    booking.status = BookingStatus.COMPLETED
    booking.completed_at = datetime.utcnow()
    db.commit()
    db.refresh(booking)

    log_business_event("booking_completed", "booking", booking.id, current_user.id)
    return _action(booking, "Réservation marquée comme terminée.")


# Professor cancels booking

@router.post("/{booking_id}/cancel", response_model=BookingActionResponse)
def cancel_booking(
    booking_id: int,
    cancel_in: ProfessorCancel,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_professor),
):
    booking = _get_own_booking(db, booking_id, current_user)

    booking_lifecycle.cancel(booking, CancelledBy.PROFESSOR, cancel_in.cancellation_reason)
    db.commit()
    db.refresh(booking)

    log_business_event(
        "booking_cancelled", "booking", booking.id, current_user.id,
        {"by": "professor", "reason": cancel_in.cancellation_reason},
    )
    return _action(booking, "Réservation annulée.")
