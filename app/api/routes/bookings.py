# app/api/routes/bookings.py
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.enums import BookingStatus, BookingType, CancelledBy, PaymentStatus
from app.core.exceptions import AuthorizationError
from app.core.logging_utils import log_business_event
from app.core.security import require_student
from app.db.base import get_db
from app.db.loaders import (
    ensure_subject_and_level,
    get_booking_or_404,
    get_professor_or_404,
    load_booking_detail,
    load_booking_details,
)
from app.db.models.booking import Booking
from app.db.models.user import User
from app.schemas.booking import (
    BookingActionResponse,
    BookingCreate,
    BookingDetail,
    BookingPage,
    BookingResponse,
    BookingUpdate,
)
from app.schemas.common import Flash
from app.services import booking_lifecycle

router = APIRouter(prefix="/student/bookings", tags=["student-bookings"])


def _get_own_booking(db: Session, booking_id: int, student: User) -> Booking:
    booking = get_booking_or_404(db, booking_id)
    if booking.student_id != student.id:
        raise AuthorizationError("Vous n'avez pas accès à cette réservation.")
    return booking


# Student creates booking

@router.post("", response_model=BookingActionResponse, status_code=status.HTTP_201_CREATED)
def create_booking(
    booking_in: BookingCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_student),
):
    # Step 1: professor must exist and carry the professor role
    professor = get_professor_or_404(db, booking_in.professor_id)

    # Step 2: referenced taxonomy rows must exist
    ensure_subject_and_level(db, booking_in.subject_id, booking_in.level_id)

    # Step 3: create booking
    booking = Booking(
        student_id=current_user.id,
        professor_id=professor.id,
        notes=booking_in.notes,
        status=BookingStatus.PENDING,
        payment_status=PaymentStatus.PENDING,
        booking_type=BookingType.STUDENT_DIRECT,
    )
    booking_lifecycle.apply_slot(booking, booking_in, professor.hourly_rate)

    db.add(booking)
    db.commit()
    db.refresh(booking)

    log_business_event(
        "booking_created", "booking", booking.id, current_user.id,
        {"professor_id": professor.id, "total_price": booking.total_price},
    )

    return BookingActionResponse(
        flash=Flash(success="Réservation créée avec succès. En attente de confirmation du professeur."),
        redirect_to=f"/student/bookings/{booking.id}",
        booking=BookingResponse.model_validate(booking),
    )


# Student views their bookings

@router.get("", response_model=BookingPage)
def my_bookings(
    page: int = Query(1, ge=1),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_student),
):
    per_page = settings.list_page_size
    query = db.query(Booking).filter(Booking.student_id == current_user.id)
    total = query.count()
    items = load_booking_details(
        query.order_by(Booking.created_at.desc(), Booking.id.desc())
        .offset((page - 1) * per_page)
        .limit(per_page)
    )
    return BookingPage(total=total, page=page, per_page=per_page, items=items)


@router.get("/{booking_id}", response_model=BookingDetail)
def show_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_student),
):
    _get_own_booking(db, booking_id, current_user)
    return load_booking_detail(db, booking_id)


# Student edits booking (back to pending)

@router.put("/{booking_id}", response_model=BookingActionResponse)
def update_booking(
    booking_id: int,
    booking_in: BookingUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_student),
):
    booking = _get_own_booking(db, booking_id, current_user)
    ensure_subject_and_level(db, booking_in.subject_id, booking_in.level_id)

    booking_lifecycle.apply_slot(booking, booking_in, booking.professor.hourly_rate)
    booking.notes = booking_in.notes
    booking.status = BookingStatus.PENDING

    db.commit()
    db.refresh(booking)

    log_business_event("booking_updated", "booking", booking.id, current_user.id)

    return BookingActionResponse(
        flash=Flash(success="Réservation mise à jour avec succès."),
        redirect_to=f"/student/bookings/{booking.id}",
        booking=BookingResponse.model_validate(booking),
    )


# Student cancels booking

@router.post("/{booking_id}/cancel", response_model=BookingActionResponse)
def cancel_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_student),
):
    booking = _get_own_booking(db, booking_id, current_user)

    booking_lifecycle.cancel(booking, CancelledBy.STUDENT)

    db.commit()
    db.refresh(booking)

    log_business_event("booking_cancelled", "booking", booking.id, current_user.id, {"by": "student"})

    return BookingActionResponse(
        flash=Flash(success="Réservation annulée avec succès."),
        redirect_to=f"/student/bookings/{booking.id}",
        booking=BookingResponse.model_validate(booking),
    )
