# app/api/routes/professor_profile.py
from fastapi import APIRouter, Depends
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.enums import BookingStatus
from app.core.logging_utils import log_business_event
from app.core.security import require_professor
from app.db.base import get_db
from app.db.loaders import ensure_exists
from app.db.models.booking import Booking
from app.db.models.taxonomy import City, Level, Subject
from app.db.models.user import User
from app.schemas.common import Flash
from app.schemas.user import (
    ProfessorProfileActionResponse,
    ProfessorProfilePage,
    ProfessorProfileResponse,
    ProfessorProfileStats,
    ProfessorProfileUpdate,
)

router = APIRouter(prefix="/professor/profile", tags=["professor-profile"])

# body field -> (model, relationship on User)
_SYNCED = {
    "subject_ids": (Subject, "subjects"),
    "level_ids": (Level, "levels"),
    "city_ids": (City, "cities"),
}


def _profile_stats(db: Session, professor: User) -> ProfessorProfileStats:
    mine = db.query(Booking).filter(Booking.professor_id == professor.id)

    minutes = (
        mine.filter(Booking.status == BookingStatus.COMPLETED)
        .with_entities(func.coalesce(func.sum(Booking.duration), 0))
        .scalar()
    )
    students = mine.with_entities(func.count(func.distinct(Booking.student_id))).scalar()
    children = mine.with_entities(func.count(func.distinct(Booking.child_id))).scalar()

    return ProfessorProfileStats(
        total_hours_taught=round(minutes / 60, 2),
        total_students=int(students or 0) + int(children or 0),
        average_rating=professor.rating or 0.0,
        total_reviews=professor.total_reviews or 0,
    )


@router.get("", response_model=ProfessorProfilePage)
def show_profile(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_professor),
):
    return ProfessorProfilePage(
        profile=ProfessorProfileResponse.model_validate(current_user),
        stats=_profile_stats(db, current_user),
    )


@router.put("", response_model=ProfessorProfileActionResponse)
def update_profile(
    profile_in: ProfessorProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_professor),
):
    update_data = profile_in.model_dump(exclude_unset=True)

    for field, (model, attr) in _SYNCED.items():
        ids = update_data.pop(field, None)
        if ids is None:
            continue
        rows = [ensure_exists(db, model, field, row_id) for row_id in dict.fromkeys(ids)]
        setattr(current_user, attr, rows)

    for field, value in update_data.items():
        setattr(current_user, field, value)

    db.commit()
    db.refresh(current_user)

    log_business_event(
        "professor_profile_updated", "user", current_user.id, current_user.id,
        {"fields": sorted(profile_in.model_fields_set)},
    )

    return ProfessorProfileActionResponse(
        flash=Flash(success="Profil mis à jour avec succès."),
        redirect_to="/professor/profile",
        profile=ProfessorProfileResponse.model_validate(current_user),
    )
