from app.core.enums import ModerationStatus
from app.db.models.review import Review
from app.services.ratings import recalculate_professor_rating


def _review(professor, student, rating, status):
    return Review(
        professor_id=professor.id, student_id=student.id, rating=rating,
        title="Avis", comment="Commentaire", moderation_status=status,
    )


def test_rating_averages_non_rejected_reviews(db, professor, student, other_student, admin):
    db.add_all([
        _review(professor, student, 4, ModerationStatus.APPROVED),
        _review(professor, other_student, 5, ModerationStatus.PENDING),
        _review(professor, admin, 1, ModerationStatus.REJECTED),
    ])
    db.commit()

    recalculate_professor_rating(db, professor.id)
    db.refresh(professor)
    assert professor.rating == 4.5
    assert professor.total_reviews == 2


def test_rating_rounds_to_two_places(db, professor, student, other_student, admin):
    db.add_all([
        _review(professor, student, 5, ModerationStatus.APPROVED),
        _review(professor, other_student, 4, ModerationStatus.APPROVED),
        _review(professor, admin, 4, ModerationStatus.APPROVED),
    ])
    db.commit()

    recalculate_professor_rating(db, professor.id)
    db.refresh(professor)
    assert professor.rating == 4.33
    assert professor.total_reviews == 3


def test_rating_resets_without_reviews(db, professor):
    professor.rating = 3.0
    professor.total_reviews = 4
    db.commit()

    recalculate_professor_rating(db, professor.id)
    db.refresh(professor)
    assert professor.rating == 0.0
    assert professor.total_reviews == 0
