# app/api/routes/admin.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import func
from typing import List
from datetime import datetime

from app.db.base import get_db
from app.db.loaders import get_booking_or_404, get_feedback_or_404, get_review_or_404
from app.db.models.user import User
from app.db.models.booking import Booking
from app.db.models.feedback import Feedback
from app.db.models.review import Review
from app.core.enums import BookingStatus, ModerationStatus, PaymentStatus
from app.core.exceptions import BusinessRuleError
from app.core.logging_utils import log_business_event
from app.core.security import require_admin
from app.schemas.admin import (
    BookingAdminActionResponse,
    BookingStats,
    BookingStatusUpdate,
    FeedbackAdminActionResponse,
    PaymentStatusUpdate,
    ReviewAdminActionResponse,
)
from app.schemas.booking import BookingResponse
from app.schemas.common import ActionResponse, Flash
from app.schemas.feedback import FeedbackResponse, FeedbackRespond, FeedbackStats
from app.schemas.review import RatingBucket, ReviewModerate, ReviewResponse, ReviewStats
from app.services.ratings import recalculate_professor_rating

router = APIRouter(prefix="/admin", tags=["admin"])


def _rating_distribution(db: Session, model) -> List[RatingBucket]:
    rows = db.query(model.rating, func.count(model.id)).group_by(model.rating).order_by(model.rating).all()
    return [RatingBucket(rating=int(rating), count=int(count)) for rating, count in rows]


def _booking_action(booking: Booking, message: str) -> BookingAdminActionResponse:
    return BookingAdminActionResponse(
        flash=Flash(success=message),
        redirect_to=f"/admin/bookings/{booking.id}",
        booking=BookingResponse.model_validate(booking),
    )


def _review_action(review: Review, message: str) -> ReviewAdminActionResponse:
    return ReviewAdminActionResponse(
        flash=Flash(success=message),
        redirect_to=f"/admin/reviews/{review.id}",
        review=ReviewResponse.model_validate(review),
    )


def _feedback_action(feedback: Feedback, message: str) -> FeedbackAdminActionResponse:
    return FeedbackAdminActionResponse(
        flash=Flash(success=message),
        redirect_to=f"/admin/feedback/{feedback.id}",
        feedback=FeedbackResponse.model_validate(feedback),
    )


# --------------------------------------------------
# 1. Bookings: status override, payment status, delete, stats
# --------------------------------------------------
@router.get("/bookings/stats", response_model=BookingStats)
def booking_stats(db: Session = Depends(get_db), current_user: User = Depends(require_admin)):
    by_status = {s.value: 0 for s in BookingStatus}
    for value, count in db.query(Booking.status, func.count(Booking.id)).group_by(Booking.status).all():
        by_status[BookingStatus(value).value] = int(count)

    by_payment = {s.value: 0 for s in PaymentStatus}
    for value, count in db.query(Booking.payment_status, func.count(Booking.id)).group_by(Booking.payment_status).all():
        by_payment[PaymentStatus(value).value] = int(count)

    total_revenue = db.query(func.coalesce(func.sum(Booking.total_price), 0)).filter(
        Booking.status == BookingStatus.COMPLETED
    ).scalar() or 0.0
    average_price = db.query(func.avg(Booking.total_price)).scalar()
    average_duration = db.query(func.avg(Booking.duration)).scalar()

    return BookingStats(
        total_bookings=sum(by_status.values()),
        by_status=by_status,
        by_payment_status=by_payment,
        total_revenue=float(total_revenue),
        average_price=float(average_price or 0.0),
        average_duration=float(average_duration or 0.0),
    )


@router.post("/bookings/{booking_id}/status", response_model=BookingAdminActionResponse)
def admin_update_booking_status(
    booking_id: int,
    body: BookingStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    booking = get_booking_or_404(db, booking_id)
    old_status = BookingStatus(booking.status)

    booking.status = body.status
    if body.notes is not None:
        booking.admin_notes = body.notes

    # cancelling a paid booking refunds it
    if body.status == BookingStatus.CANCELLED and old_status != BookingStatus.CANCELLED:
        if booking.payment_status == PaymentStatus.PAID:
            booking.payment_status = PaymentStatus.REFUNDED

    db.commit()
    db.refresh(booking)

    log_business_event(
        "booking_status_overridden", "booking", booking.id, current_user.id,
        {"from": old_status.value, "to": body.status.value},
    )
    return _booking_action(booking, "Statut de la réservation mis à jour avec succès.")


@router.post("/bookings/{booking_id}/payment-status", response_model=BookingAdminActionResponse)
def admin_update_payment_status(
    booking_id: int,
    body: PaymentStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    booking = get_booking_or_404(db, booking_id)

    booking.payment_status = PaymentStatus(body.payment_status)
    if body.transaction_id is not None:
        booking.transaction_id = body.transaction_id
    if body.notes is not None:
        booking.admin_notes = body.notes

    db.commit()
    db.refresh(booking)

    log_business_event(
        "booking_payment_status_updated", "booking", booking.id, current_user.id,
        {"payment_status": body.payment_status},
    )
    return _booking_action(booking, "Statut de paiement mis à jour avec succès.")


@router.delete("/bookings/{booking_id}", response_model=ActionResponse)
def admin_delete_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    booking = get_booking_or_404(db, booking_id)
    if booking.status in (BookingStatus.CONFIRMED, BookingStatus.COMPLETED):
        raise BusinessRuleError("Impossible de supprimer une réservation confirmée ou terminée.")

    db.delete(booking)
    db.commit()

    log_business_event("booking_deleted", "booking", booking_id, current_user.id)
    return ActionResponse(flash=Flash(success="Réservation supprimée avec succès."), redirect_to="/admin/bookings")


# --------------------------------------------------
# 2. Reviews moderation
# --------------------------------------------------
@router.get("/reviews/stats", response_model=ReviewStats)
def review_stats(db: Session = Depends(get_db), current_user: User = Depends(require_admin)):
    def count(*criteria):
        return int(db.query(func.count(Review.id)).filter(*criteria).scalar() or 0)

    average = db.query(func.avg(Review.rating)).scalar()
    return ReviewStats(
        total_reviews=count(),
        pending_reviews=count(Review.moderation_status == ModerationStatus.PENDING),
        approved_reviews=count(Review.moderation_status == ModerationStatus.APPROVED),
        rejected_reviews=count(Review.moderation_status == ModerationStatus.REJECTED),
        verified_reviews=count(Review.is_verified.is_(True)),
        featured_reviews=count(Review.is_featured.is_(True)),
        average_rating=round(float(average or 0.0), 2),
        rating_distribution=_rating_distribution(db, Review),
    )


@router.post("/reviews/{review_id}/moderate", response_model=ReviewAdminActionResponse)
def moderate_review(
    review_id: int,
    body: ReviewModerate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    review = get_review_or_404(db, review_id)

    review.moderation_status = body.moderation_status
    review.moderated_by = current_user.name
    review.moderated_at = datetime.utcnow()
    if body.admin_notes is not None:
        review.admin_notes = body.admin_notes

    db.commit()
    db.refresh(review)

    recalculate_professor_rating(db, review.professor_id)
    log_business_event(
        "review_moderated", "review", review.id, current_user.id,
        {"moderation_status": body.moderation_status.value},
    )
    return _review_action(review, "Avis modéré avec succès.")


@router.post("/reviews/{review_id}/toggle-verification", response_model=ReviewAdminActionResponse)
def toggle_review_verification(
    review_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    review = get_review_or_404(db, review_id)
    review.is_verified = not review.is_verified
    db.commit()
    db.refresh(review)

    log_business_event(
        "review_verification_toggled", "review", review.id, current_user.id,
        {"is_verified": review.is_verified},
    )

    label = "vérifié" if review.is_verified else "non vérifié"
    return _review_action(review, f"Avis {label} avec succès.")


@router.post("/reviews/{review_id}/toggle-featured", response_model=ReviewAdminActionResponse)
def toggle_review_featured(
    review_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    review = get_review_or_404(db, review_id)
    review.is_featured = not review.is_featured
    db.commit()
    db.refresh(review)

    log_business_event(
        "review_featured_toggled", "review", review.id, current_user.id,
        {"is_featured": review.is_featured},
    )

    label = "mis en avant" if review.is_featured else "retiré de la mise en avant"
    return _review_action(review, f"Avis {label} avec succès.")


@router.delete("/reviews/{review_id}", response_model=ActionResponse)
def admin_delete_review(
    review_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    review = get_review_or_404(db, review_id)
    professor_id = review.professor_id
    db.delete(review)
    db.commit()

    recalculate_professor_rating(db, professor_id)
    log_business_event("review_deleted", "review", review_id, current_user.id)
    return ActionResponse(flash=Flash(success="Avis supprimé avec succès."), redirect_to="/admin/reviews")


# --------------------------------------------------
# 3. Feedback follow-up
# --------------------------------------------------
@router.get("/feedback/stats", response_model=FeedbackStats)
def feedback_stats(db: Session = Depends(get_db), current_user: User = Depends(require_admin)):
    total = int(db.query(func.count(Feedback.id)).scalar() or 0)
    resolved = int(db.query(func.count(Feedback.id)).filter(Feedback.is_resolved.is_(True)).scalar() or 0)
    recommending = int(db.query(func.count(Feedback.id)).filter(Feedback.would_recommend.is_(True)).scalar() or 0)
    average = db.query(func.avg(Feedback.rating)).scalar()

    return FeedbackStats(
        total_feedbacks=total,
        resolved_feedbacks=resolved,
        unresolved_feedbacks=total - resolved,
        average_rating=round(float(average or 0.0), 2),
        recommend_rate=round(recommending / total, 4) if total else 0.0,
        rating_distribution=_rating_distribution(db, Feedback),
    )


@router.post("/feedback/{feedback_id}/respond", response_model=FeedbackAdminActionResponse)
def respond_to_feedback(
    feedback_id: int,
    body: FeedbackRespond,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    feedback = get_feedback_or_404(db, feedback_id)
    feedback.admin_response = body.admin_response
    feedback.resolved_by = current_user.name
    feedback.resolved_at = datetime.utcnow()
    db.commit()
    db.refresh(feedback)

    log_business_event("feedback_responded", "feedback", feedback.id, current_user.id)
    return _feedback_action(feedback, "Réponse ajoutée avec succès.")


@router.post("/feedback/{feedback_id}/resolve", response_model=FeedbackAdminActionResponse)
def resolve_feedback(
    feedback_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    feedback = get_feedback_or_404(db, feedback_id)
    feedback.is_resolved = True
    feedback.resolved_by = current_user.name
    feedback.resolved_at = datetime.utcnow()
    db.commit()
    db.refresh(feedback)

    log_business_event("feedback_resolved", "feedback", feedback.id, current_user.id)
    return _feedback_action(feedback, "Feedback marqué comme résolu.")


@router.post("/feedback/{feedback_id}/unresolve", response_model=FeedbackAdminActionResponse)
def unresolve_feedback(
    feedback_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    feedback = get_feedback_or_404(db, feedback_id)
    feedback.is_resolved = False
    feedback.resolved_by = None
    feedback.resolved_at = None
    db.commit()
    db.refresh(feedback)

    log_business_event("feedback_unresolved", "feedback", feedback.id, current_user.id)
    return _feedback_action(feedback, "Feedback marqué comme non résolu.")


@router.delete("/feedback/{feedback_id}", response_model=ActionResponse)
def admin_delete_feedback(
    feedback_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    feedback = get_feedback_or_404(db, feedback_id)
    db.delete(feedback)
    db.commit()

    log_business_event("feedback_deleted", "feedback", feedback_id, current_user.id)
    return ActionResponse(flash=Flash(success="Feedback supprimé avec succès."), redirect_to="/admin/feedback")
