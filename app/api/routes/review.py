# app/api/routes/review.py
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session, joinedload

from app.core.config import settings
from app.core.enums import ModerationStatus
from app.core.exceptions import AuthorizationError
from app.core.logging_utils import log_business_event
from app.core.security import require_student
from app.db.base import get_db
from app.db.loaders import get_professor_or_404, get_review_or_404
from app.db.models.review import Review
from app.db.models.user import User
from app.schemas.common import ActionResponse, Flash
from app.schemas.review import (
    ReviewActionResponse,
    ReviewDetail,
    ReviewPage,
    ReviewResponse,
    ReviewWrite,
)
from app.services.ratings import recalculate_professor_rating

router = APIRouter(prefix="/student/reviews", tags=["student-reviews"])


def _get_own_review(db: Session, review_id: int, student: User) -> Review:
    review = get_review_or_404(db, review_id)
    if review.student_id != student.id:
        raise AuthorizationError("Vous n'avez pas accès à cet avis.")
    return review


# Student lists their reviews

@router.get("", response_model=ReviewPage)
def my_reviews(
    page: int = Query(1, ge=1),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_student),
):
    per_page = settings.list_page_size
    query = db.query(Review).filter(Review.student_id == current_user.id)
    total = query.count()
    rows = (
        query.options(joinedload(Review.professor))
        .order_by(Review.created_at.desc(), Review.id.desc())
        .offset((page - 1) * per_page)
        .limit(per_page)
        .all()
    )
    return ReviewPage(
        total=total,
        page=page,
        per_page=per_page,
        items=[ReviewDetail.model_validate(r) for r in rows],
    )


# Student reviews a professor (once)

@router.post("/{professor_id}", response_model=ReviewActionResponse, status_code=status.HTTP_201_CREATED)
def create_review(
    professor_id: int,
    review_in: ReviewWrite,
    response: Response,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_student),
):
    professor = get_professor_or_404(db, professor_id)

    existing = db.query(Review).filter(
        Review.professor_id == professor.id,
        Review.student_id == current_user.id,
    ).first()
    if existing:
        response.status_code = status.HTTP_200_OK
        return ReviewActionResponse(
            flash=Flash(error="Vous avez déjà donné un avis pour ce professeur."),
            redirect_to=f"/student/reviews/{existing.id}/edit",
        )

    review = Review(
        professor_id=professor.id,
        student_id=current_user.id,
        rating=review_in.rating,
        title=review_in.title,
        comment=review_in.comment,
        would_recommend=review_in.would_recommend,
        moderation_status=ModerationStatus.PENDING,
    )
    db.add(review)
    db.commit()
    db.refresh(review)

    recalculate_professor_rating(db, professor.id)
    log_business_event("review_created", "review", review.id, current_user.id, {"professor_id": professor.id})

    return ReviewActionResponse(
        flash=Flash(success="Votre avis a été publié avec succès."),
        redirect_to="/student/reviews",
        review=ReviewResponse.model_validate(review),
    )


@router.get("/{review_id}/edit", response_model=ReviewDetail)
def edit_review(
    review_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_student),
):
    return _get_own_review(db, review_id, current_user)


@router.put("/{review_id}", response_model=ReviewActionResponse)
def update_review(
    review_id: int,
    review_in: ReviewWrite,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_student),
):
    review = _get_own_review(db, review_id, current_user)

    review.rating = review_in.rating
    review.title = review_in.title
    review.comment = review_in.comment
    review.would_recommend = review_in.would_recommend
    db.commit()
    db.refresh(review)

    recalculate_professor_rating(db, review.professor_id)
    log_business_event("review_updated", "review", review.id, current_user.id)

    return ReviewActionResponse(
        flash=Flash(success="Votre avis a été mis à jour avec succès."),
        redirect_to="/student/reviews",
        review=ReviewResponse.model_validate(review),
    )


@router.delete("/{review_id}", response_model=ActionResponse)
def delete_review(
    review_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_student),
):
    review = _get_own_review(db, review_id, current_user)
    professor_id = review.professor_id

    db.delete(review)
    db.commit()

    recalculate_professor_rating(db, professor_id)
    log_business_event("review_deleted", "review", review_id, current_user.id)

    return ActionResponse(
        flash=Flash(success="Votre avis a été supprimé avec succès."),
        redirect_to="/student/reviews",
    )
