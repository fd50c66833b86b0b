# app/services/ratings.py
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.enums import ModerationStatus
from app.db.models.review import Review
from app.db.models.user import User


def recalculate_professor_rating(db: Session, professor_id: int):
    """Recompute rating/total_reviews from the professor's non-rejected reviews."""
    professor = db.query(User).filter(User.id == professor_id).first()
    if not professor:
        return

    avg_rating, total = (
        db.query(func.avg(Review.rating), func.count(Review.id))
        .filter(
            Review.professor_id == professor_id,
            Review.moderation_status != ModerationStatus.REJECTED,
        )
        .one()
    )
    professor.rating = round(float(avg_rating), 2) if total else 0.0
    professor.total_reviews = int(total or 0)
    db.add(professor)
    db.commit()
