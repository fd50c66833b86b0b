# app/api/routes/parent.py
from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.enums import BookingStatus, BookingType, CancelledBy, PaymentStatus
from app.core.exceptions import AuthorizationError, BusinessRuleError
from app.core.logging_utils import log_business_event
from app.core.security import require_parent
from app.db.base import get_db
from app.db.loaders import (
    ensure_subject_and_level,
    get_booking_or_404,
    get_child_for_parent_or_404,
    get_professor_or_404,
    load_booking_detail,
    load_booking_details,
)
from app.db.models.booking import Booking
from app.db.models.child import Child
from app.db.models.user import User
from app.schemas.booking import (
    BookingActionResponse,
    BookingDetail,
    BookingPage,
    BookingResponse,
    ParentBookingCreate,
    ParentBookingUpdate,
)
from app.schemas.child import ChildCreate, ChildResponse
from app.schemas.common import ActionResponse, Flash
from app.services import booking_lifecycle

router = APIRouter(prefix="/parent", tags=["parent"])

NOT_EDITABLE = "Cette réservation ne peut plus être modifiée."


# --- children ---

@router.get("/children", response_model=List[ChildResponse])
def list_children(db: Session = Depends(get_db), current_user: User = Depends(require_parent)):
    return db.query(Child).filter(Child.parent_id == current_user.id).order_by(Child.name).all()


@router.post("/children", response_model=ChildResponse, status_code=status.HTTP_201_CREATED)
def add_child(
    child_in: ChildCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_parent),
):
    child = Child(
        parent_id=current_user.id,
        name=child_in.name,
        grade=child_in.grade,
        age=child_in.age,
        notes=child_in.notes,
    )
    db.add(child)
    db.commit()
    db.refresh(child)
    return child


@router.delete("/children/{child_id}", response_model=ActionResponse)
def remove_child(
    child_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_parent),
):
    child = get_child_for_parent_or_404(db, child_id, current_user.id)
    db.delete(child)
    db.commit()
    return ActionResponse(flash=Flash(success="Enfant supprimé."), redirect_to="/parent/children")


# --- bookings ---

def _get_own_booking(db: Session, booking_id: int, parent: User) -> Booking:
    booking = get_booking_or_404(db, booking_id)
    if booking.parent_id != parent.id:
        raise AuthorizationError("Vous n'avez pas accès à cette réservation.")
    return booking


@router.post("/bookings", response_model=BookingActionResponse, status_code=status.HTTP_201_CREATED)
def create_booking(
    booking_in: ParentBookingCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_parent),
):
    professor = get_professor_or_404(db, booking_in.professor_id)
    child = get_child_for_parent_or_404(db, booking_in.child_id, current_user.id)
    ensure_subject_and_level(db, booking_in.subject_id, booking_in.level_id)

    booking = Booking(
        parent_id=current_user.id,
        child_id=child.id,
        professor_id=professor.id,
        notes=booking_in.notes,
        payment_method=booking_in.payment_method,
        status=BookingStatus.PENDING,
        payment_status=PaymentStatus.PENDING,
        booking_type=BookingType.PARENT_CHILD,
    )
    booking_lifecycle.apply_slot(booking, booking_in, professor.hourly_rate)

    db.add(booking)
    db.commit()
    db.refresh(booking)

    log_business_event(
        "booking_created", "booking", booking.id, current_user.id,
        {"professor_id": professor.id, "child_id": child.id, "total_price": booking.total_price},
    )

    return BookingActionResponse(
        flash=Flash(success="Réservation créée avec succès. En attente de confirmation du professeur."),
        redirect_to=f"/parent/bookings/{booking.id}",
        booking=BookingResponse.model_validate(booking),
    )


@router.get("/bookings", response_model=BookingPage)
def my_bookings(
    page: int = Query(1, ge=1),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_parent),
):
    per_page = settings.list_page_size
    query = db.query(Booking).filter(Booking.parent_id == current_user.id)
    total = query.count()
    items = load_booking_details(
        query.order_by(Booking.created_at.desc(), Booking.id.desc())
        .offset((page - 1) * per_page)
        .limit(per_page)
    )
    return BookingPage(total=total, page=page, per_page=per_page, items=items)


@router.get("/bookings/{booking_id}", response_model=BookingDetail)
def show_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_parent),
):
    _get_own_booking(db, booking_id, current_user)
    return load_booking_detail(db, booking_id)


@router.put("/bookings/{booking_id}", response_model=BookingActionResponse)
def update_booking(
    booking_id: int,
    booking_in: ParentBookingUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_parent),
):
    booking = _get_own_booking(db, booking_id, current_user)
    if booking.status != BookingStatus.PENDING:
        raise BusinessRuleError(NOT_EDITABLE, {"status": BookingStatus(booking.status).value})

    child = get_child_for_parent_or_404(db, booking_in.child_id, current_user.id)
    ensure_subject_and_level(db, booking_in.subject_id, booking_in.level_id)

    booking.child_id = child.id
    booking_lifecycle.apply_slot(booking, booking_in, booking.professor.hourly_rate)
    booking.notes = booking_in.notes

    db.commit()
    db.refresh(booking)

    log_business_event(
        "booking_updated", "booking", booking.id, current_user.id,
        {"child_id": child.id, "total_price": booking.total_price},
    )

    return BookingActionResponse(
        flash=Flash(success="Réservation mise à jour avec succès."),
        redirect_to=f"/parent/bookings/{booking.id}",
        booking=BookingResponse.model_validate(booking),
    )


@router.post("/bookings/{booking_id}/cancel", response_model=BookingActionResponse)
def cancel_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_parent),
):
    booking = _get_own_booking(db, booking_id, current_user)

    booking_lifecycle.cancel(booking, CancelledBy.PARENT)
    db.commit()
    db.refresh(booking)

    log_business_event("booking_cancelled", "booking", booking.id, current_user.id, {"by": "parent"})

    return BookingActionResponse(
        flash=Flash(success="Réservation annulée avec succès."),
        redirect_to=f"/parent/bookings/{booking.id}",
        booking=BookingResponse.model_validate(booking),
    )
