# app/api/routes/feedback.py
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session, joinedload

from app.core.config import settings
from app.core.enums import BookingStatus, ModerationStatus
from app.core.exceptions import AuthorizationError
from app.core.logging_utils import log_business_event
from app.core.security import require_student
from app.db.base import get_db
from app.db.loaders import get_booking_or_404, get_feedback_or_404, load_booking_detail
from app.db.models.booking import Booking
from app.db.models.feedback import Feedback
from app.db.models.user import User
from app.schemas.common import ActionResponse, Flash
from app.schemas.feedback import (
    FeedbackActionResponse,
    FeedbackDetail,
    FeedbackForm,
    FeedbackPage,
    FeedbackResponse,
    FeedbackWrite,
)

router = APIRouter(prefix="/student/feedback", tags=["student-feedback"])


def _get_rateable_booking(db: Session, booking_id: int, student: User) -> Booking:
    booking = get_booking_or_404(db, booking_id)
    if booking.student_id != student.id:
        raise AuthorizationError("Vous n'avez pas accès à cette réservation.")
    if booking.status != BookingStatus.COMPLETED:
        raise AuthorizationError("Vous ne pouvez donner un feedback qu'après la fin de la session.")
    return booking


def _existing_for(db: Session, booking_id: int):
    return db.query(Feedback).filter(Feedback.booking_id == booking_id).first()


def _get_own_feedback(db: Session, feedback_id: int, student: User) -> Feedback:
    feedback = get_feedback_or_404(db, feedback_id)
    if feedback.student_id != student.id:
        raise AuthorizationError("Vous n'avez pas accès à ce feedback.")
    return feedback


@router.get("", response_model=FeedbackPage)
def my_feedback(
    page: int = Query(1, ge=1),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_student),
):
    per_page = settings.list_page_size
    query = db.query(Feedback).filter(Feedback.student_id == current_user.id)
    total = query.count()
    rows = (
        query.options(joinedload(Feedback.professor))
        .order_by(Feedback.created_at.desc(), Feedback.id.desc())
        .offset((page - 1) * per_page)
        .limit(per_page)
        .all()
    )
    return FeedbackPage(
        total=total,
        page=page,
        per_page=per_page,
        items=[FeedbackDetail.model_validate(f) for f in rows],
    )


@router.get("/bookings/{booking_id}/create", response_model=FeedbackForm)
def create_form(
    booking_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_student),
):
    booking = _get_rateable_booking(db, booking_id, current_user)

    existing = _existing_for(db, booking.id)
    if existing:
        return FeedbackForm(redirect_to=f"/student/feedback/{existing.id}/edit")

    return FeedbackForm(booking=load_booking_detail(db, booking.id))


# Student rates a completed session (once per booking)

@router.post("/bookings/{booking_id}", response_model=FeedbackActionResponse, status_code=status.HTTP_201_CREATED)
def create_feedback(
    booking_id: int,
    feedback_in: FeedbackWrite,
    response: Response,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_student),
):
    booking = _get_rateable_booking(db, booking_id, current_user)

    existing = _existing_for(db, booking.id)
    if existing:
        response.status_code = status.HTTP_200_OK
        return FeedbackActionResponse(
            flash=Flash(error="Vous avez déjà donné un feedback pour cette session."),
            redirect_to=f"/student/feedback/{existing.id}/edit",
        )

    feedback = Feedback(
        booking_id=booking.id,
        professor_id=booking.professor_id,
        student_id=current_user.id,
        rating=feedback_in.rating,
        comment=feedback_in.comment,
        would_recommend=feedback_in.would_recommend,
        status=ModerationStatus.PENDING,
    )
    db.add(feedback)
    db.commit()
    db.refresh(feedback)

    log_business_event("feedback_created", "feedback", feedback.id, current_user.id, {"booking_id": booking.id})

    return FeedbackActionResponse(
        flash=Flash(success="Merci pour votre feedback !"),
        redirect_to="/student/feedback",
        feedback=FeedbackResponse.model_validate(feedback),
    )


@router.get("/{feedback_id}/edit", response_model=FeedbackDetail)
def edit_feedback(
    feedback_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_student),
):
    return _get_own_feedback(db, feedback_id, current_user)


@router.put("/{feedback_id}", response_model=FeedbackActionResponse)
def update_feedback(
    feedback_id: int,
    feedback_in: FeedbackWrite,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_student),
):
    feedback = _get_own_feedback(db, feedback_id, current_user)

    feedback.rating = feedback_in.rating
    feedback.comment = feedback_in.comment
    feedback.would_recommend = feedback_in.would_recommend
    db.commit()
    db.refresh(feedback)

    log_business_event("feedback_updated", "feedback", feedback.id, current_user.id)

    return FeedbackActionResponse(
        flash=Flash(success="Votre feedback a été mis à jour avec succès."),
        redirect_to="/student/feedback",
        feedback=FeedbackResponse.model_validate(feedback),
    )


@router.delete("/{feedback_id}", response_model=ActionResponse)
def delete_feedback(
    feedback_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_student),
):
    feedback = _get_own_feedback(db, feedback_id, current_user)
    db.delete(feedback)
    db.commit()

    log_business_event("feedback_deleted", "feedback", feedback_id, current_user.id)

    return ActionResponse(
        flash=Flash(success="Votre feedback a été supprimé avec succès."),
        redirect_to="/student/feedback",
    )
