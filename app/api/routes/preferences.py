# app/api/routes/preferences.py
"""
Attach/detach taxonomy rows to a user.

Students keep wish lists (subjects, levels, cities): attaching twice is a
no-op and detaching something absent is silent. Professors declare what and
where they teach: both of those cases are refused with a flash error.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.exceptions import BusinessRuleError, ValidationError
from app.core.logging_utils import log_business_event
from app.core.security import require_professor, require_student
from app.db.base import get_db
from app.db.loaders import taxonomy_items
from app.db.models.taxonomy import City, Level, Subject
from app.db.models.user import User
from app.schemas.common import Flash
from app.schemas.preferences import (
    CityAttach,
    LevelAttach,
    PreferenceActionResponse,
    PreferenceList,
    SubjectAttach,
)

router = APIRouter(tags=["preferences"])

# (taxonomy model, body field, label used in messages) per kind
_KINDS = {
    "subjects": (Subject, "subject_id", "Cette matière"),
    "levels": (Level, "level_id", "Ce niveau"),
    "cities": (City, "city_id", "Cette ville"),
}

_STUDENT_ATTR = {
    "subjects": "preferred_subjects",
    "levels": "preferred_levels",
    "cities": "preferred_cities",
}


def _load_row(db: Session, kind: str, row_id: int):
    model, field, _ = _KINDS[kind]
    row = db.query(model).filter(model.id == row_id).first()
    if not row:
        raise ValidationError.for_field(field, f"Le champ {field} sélectionné est invalide.")
    return row


def _listing(db: Session, user: User, kind: str, attr: str) -> PreferenceList:
    model = _KINDS[kind][0]
    available = db.query(model).filter(model.is_active.isnot(False)).all()
    return PreferenceList(
        selected=taxonomy_items(getattr(user, attr)),
        available=taxonomy_items(available),
    )


def _student_attach(db: Session, user: User, kind: str, row_id: int) -> PreferenceActionResponse:
    row = _load_row(db, kind, row_id)
    collection = getattr(user, _STUDENT_ATTR[kind])
    if row not in collection:
        collection.append(row)
        db.commit()
    return PreferenceActionResponse(
        flash=Flash(success="Préférences mises à jour."),
        redirect_to=f"/student/{kind}",
        selected=taxonomy_items(collection),
    )


def _student_detach(db: Session, user: User, kind: str, row_id: int) -> PreferenceActionResponse:
    collection = getattr(user, _STUDENT_ATTR[kind])
    for row in list(collection):
        if row.id == row_id:
            collection.remove(row)
            db.commit()
    return PreferenceActionResponse(
        flash=Flash(success="Préférences mises à jour."),
        redirect_to=f"/student/{kind}",
        selected=taxonomy_items(collection),
    )


def _professor_attach(db: Session, user: User, kind: str, row_id: int, path: str) -> PreferenceActionResponse:
    row = _load_row(db, kind, row_id)
    collection = getattr(user, kind)
    label = _KINDS[kind][2]
    if row in collection:
        raise BusinessRuleError(f"{label} est déjà dans votre liste.")

    collection.append(row)
    db.commit()
    log_business_event("professor_taxonomy_attached", kind, row.id, user.id)
    return PreferenceActionResponse(
        flash=Flash(success="Liste mise à jour avec succès."),
        redirect_to=f"/professor/{path}",
        selected=taxonomy_items(collection),
    )


def _professor_detach(db: Session, user: User, kind: str, row_id: int, path: str) -> PreferenceActionResponse:
    collection = getattr(user, kind)
    label = _KINDS[kind][2]
    row = next((r for r in collection if r.id == row_id), None)
    if row is None:
        raise BusinessRuleError(f"{label} n'est pas dans votre liste.")

    collection.remove(row)
    db.commit()
    log_business_event("professor_taxonomy_detached", kind, row_id, user.id)
    return PreferenceActionResponse(
        flash=Flash(success="Liste mise à jour avec succès."),
        redirect_to=f"/professor/{path}",
        selected=taxonomy_items(collection),
    )


# --- student wish lists ---

@router.get("/student/subjects", response_model=PreferenceList)
def student_subjects(db: Session = Depends(get_db), current_user: User = Depends(require_student)):
    return _listing(db, current_user, "subjects", "preferred_subjects")


@router.post("/student/subjects", response_model=PreferenceActionResponse)
def student_add_subject(body: SubjectAttach, db: Session = Depends(get_db), current_user: User = Depends(require_student)):
    return _student_attach(db, current_user, "subjects", body.subject_id)


@router.delete("/student/subjects/{subject_id}", response_model=PreferenceActionResponse)
def student_remove_subject(subject_id: int, db: Session = Depends(get_db), current_user: User = Depends(require_student)):
    return _student_detach(db, current_user, "subjects", subject_id)


@router.get("/student/levels", response_model=PreferenceList)
def student_levels(db: Session = Depends(get_db), current_user: User = Depends(require_student)):
    return _listing(db, current_user, "levels", "preferred_levels")


@router.post("/student/levels", response_model=PreferenceActionResponse)
def student_add_level(body: LevelAttach, db: Session = Depends(get_db), current_user: User = Depends(require_student)):
    return _student_attach(db, current_user, "levels", body.level_id)


@router.delete("/student/levels/{level_id}", response_model=PreferenceActionResponse)
def student_remove_level(level_id: int, db: Session = Depends(get_db), current_user: User = Depends(require_student)):
    return _student_detach(db, current_user, "levels", level_id)


@router.get("/student/cities", response_model=PreferenceList)
def student_cities(db: Session = Depends(get_db), current_user: User = Depends(require_student)):
    return _listing(db, current_user, "cities", "preferred_cities")


@router.post("/student/cities", response_model=PreferenceActionResponse)
def student_add_city(body: CityAttach, db: Session = Depends(get_db), current_user: User = Depends(require_student)):
    return _student_attach(db, current_user, "cities", body.city_id)


@router.delete("/student/cities/{city_id}", response_model=PreferenceActionResponse)
def student_remove_city(city_id: int, db: Session = Depends(get_db), current_user: User = Depends(require_student)):
    return _student_detach(db, current_user, "cities", city_id)


# --- professor teaching profile ---

@router.get("/professor/subjects", response_model=PreferenceList)
def professor_subjects(db: Session = Depends(get_db), current_user: User = Depends(require_professor)):
    return _listing(db, current_user, "subjects", "subjects")


@router.post("/professor/subjects", response_model=PreferenceActionResponse)
def professor_add_subject(body: SubjectAttach, db: Session = Depends(get_db), current_user: User = Depends(require_professor)):
    return _professor_attach(db, current_user, "subjects", body.subject_id, "subjects")


@router.delete("/professor/subjects/{subject_id}", response_model=PreferenceActionResponse)
def professor_remove_subject(subject_id: int, db: Session = Depends(get_db), current_user: User = Depends(require_professor)):
    return _professor_detach(db, current_user, "subjects", subject_id, "subjects")


@router.get("/professor/levels", response_model=PreferenceList)
def professor_levels(db: Session = Depends(get_db), current_user: User = Depends(require_professor)):
    return _listing(db, current_user, "levels", "levels")


@router.post("/professor/levels", response_model=PreferenceActionResponse)
def professor_add_level(body: LevelAttach, db: Session = Depends(get_db), current_user: User = Depends(require_professor)):
    return _professor_attach(db, current_user, "levels", body.level_id, "levels")


@router.delete("/professor/levels/{level_id}", response_model=PreferenceActionResponse)
def professor_remove_level(level_id: int, db: Session = Depends(get_db), current_user: User = Depends(require_professor)):
    return _professor_detach(db, current_user, "levels", level_id, "levels")


# teaching zones are cities
@router.get("/professor/zones", response_model=PreferenceList)
def professor_zones(db: Session = Depends(get_db), current_user: User = Depends(require_professor)):
    return _listing(db, current_user, "cities", "cities")


@router.post("/professor/zones", response_model=PreferenceActionResponse)
def professor_add_zone(body: CityAttach, db: Session = Depends(get_db), current_user: User = Depends(require_professor)):
    return _professor_attach(db, current_user, "cities", body.city_id, "zones")


@router.delete("/professor/zones/{city_id}", response_model=PreferenceActionResponse)
def professor_remove_zone(city_id: int, db: Session = Depends(get_db), current_user: User = Depends(require_professor)):
    return _professor_detach(db, current_user, "cities", city_id, "zones")
