# app/db/loaders.py
"""
Named loaders: fetch a row (or 404) together with the relations a response
needs, and shape it into a typed aggregate.
"""
from typing import Iterable, List

from sqlalchemy.orm import Session, joinedload

from app.core.enums import RoleSlug
from app.core.exceptions import NotFoundError, ValidationError
from app.db.models.booking import Booking
from app.db.models.child import Child
from app.db.models.feedback import Feedback
from app.db.models.review import Review
from app.db.models.taxonomy import Level, Subject
from app.db.models.user import Role, User
from app.schemas.booking import BookingDetail
from app.schemas.common import SimpleUser, TaxonomyItem
from app.services.booking_pricing import ends_next_day

_BOOKING_RELATIONS = (
    joinedload(Booking.professor),
    joinedload(Booking.subject),
    joinedload(Booking.level),
    joinedload(Booking.student),
    joinedload(Booking.parent),
    joinedload(Booking.child),
)


def get_booking_or_404(db: Session, booking_id: int) -> Booking:
    booking = db.query(Booking).filter(Booking.id == booking_id).first()
    if not booking:
        raise NotFoundError("Booking", booking_id)
    return booking


def get_review_or_404(db: Session, review_id: int) -> Review:
    review = db.query(Review).filter(Review.id == review_id).first()
    if not review:
        raise NotFoundError("Review", review_id)
    return review


def get_feedback_or_404(db: Session, feedback_id: int) -> Feedback:
    feedback = db.query(Feedback).filter(Feedback.id == feedback_id).first()
    if not feedback:
        raise NotFoundError("Feedback", feedback_id)
    return feedback


def get_professor_or_404(db: Session, professor_id: int) -> User:
    professor = (
        db.query(User)
        .filter(User.id == professor_id, User.roles.any(Role.slug == RoleSlug.PROFESSOR.value))
        .first()
    )
    if not professor:
        raise NotFoundError("Professor", professor_id)
    return professor


def get_child_for_parent_or_404(db: Session, child_id: int, parent_id: int) -> Child:
    child = db.query(Child).filter(Child.id == child_id, Child.parent_id == parent_id).first()
    if not child:
        raise NotFoundError("Child", child_id)
    return child


def ensure_exists(db: Session, model, field: str, value: int):
    """Referential check on a body field: answers 422, like any other field error."""
    row = db.query(model).filter(model.id == value).first()
    if not row:
        raise ValidationError.for_field(field, f"Le champ {field} sélectionné est invalide.")
    return row


def ensure_subject_and_level(db: Session, subject_id: int, level_id: int):
    ensure_exists(db, Subject, "subject_id", subject_id)
    ensure_exists(db, Level, "level_id", level_id)


def to_booking_detail(booking: Booking) -> BookingDetail:
    return BookingDetail.model_validate(
        {
            **{c.name: getattr(booking, c.name) for c in Booking.__table__.columns},
            "professor": SimpleUser.model_validate(booking.professor),
            "subject": TaxonomyItem.model_validate(booking.subject),
            "level": TaxonomyItem.model_validate(booking.level),
            "student": SimpleUser.model_validate(booking.student) if booking.student else None,
            "parent": SimpleUser.model_validate(booking.parent) if booking.parent else None,
            "child_name": booking.child.name if booking.child else None,
            "ends_next_day": ends_next_day(booking.date, booking.start_time, booking.duration),
        }
    )


def load_booking_detail(db: Session, booking_id: int) -> BookingDetail:
    booking = (
        db.query(Booking)
        .options(*_BOOKING_RELATIONS)
        .filter(Booking.id == booking_id)
        .first()
    )
    if not booking:
        raise NotFoundError("Booking", booking_id)
    return to_booking_detail(booking)


def load_booking_details(query) -> List[BookingDetail]:
    """Apply the detail relations to a Booking query and shape every row."""
    return [to_booking_detail(b) for b in query.options(*_BOOKING_RELATIONS).all()]


def taxonomy_items(rows: Iterable) -> List[TaxonomyItem]:
    return [TaxonomyItem.model_validate(r) for r in sorted(rows, key=lambda r: r.name)]
