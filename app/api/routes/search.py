# app/api/routes/search.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy import asc, cast, desc, func, or_, String
from sqlalchemy.orm import Session
from typing import Optional

from app.core.config import settings
from app.core.enums import RoleSlug
from app.core.security import require_booker
from app.db.base import get_db
from app.db.models.taxonomy import City, Level, Subject
from app.db.models.user import Role, User
from app.schemas.search import ProfessorSearchItem, SearchFilters, SearchResponse, SortBy, SortOrder

router = APIRouter(tags=["search"])

# sort_by values map onto a fixed set of columns
SORT_COLUMNS = {
    "rating": User.rating,
    "price": User.hourly_rate,
    "name": User.name,
}


def search_professors(
    subject_id: Optional[int] = Query(None),
    level_id: Optional[int] = Query(None),
    city_id: Optional[int] = Query(None),
    min_rating: Optional[float] = Query(None, ge=0.0, le=5.0),
    max_hourly_rate: Optional[float] = Query(None, ge=0.0),
    search: Optional[str] = Query(None, description="Matches name, bio or specializations"),
    sort_by: SortBy = Query("rating"),
    sort_order: SortOrder = Query("desc"),
    page: int = Query(1, ge=1),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_booker),
):
    """
    Professors matching every given filter, 12 per page.

    - subject/level/city filters keep professors that teach it (relationship exists)
    - `search` is a case-insensitive partial match on name, bio and specializations
    - ties on the sort column are broken by id so paging is stable
    """
    base = db.query(User).filter(User.roles.any(Role.slug == RoleSlug.PROFESSOR.value))

    # Filters
    if subject_id:
        base = base.filter(User.subjects.any(Subject.id == subject_id))

    if level_id:
        base = base.filter(User.levels.any(Level.id == level_id))

    if city_id:
        base = base.filter(User.cities.any(City.id == city_id))

    if min_rating is not None:
        base = base.filter(func.coalesce(User.rating, 0) >= min_rating)

    if max_hourly_rate is not None:
        base = base.filter(User.hourly_rate <= max_hourly_rate)

    if search:
        q_like = f"%{search.strip()}%"
        base = base.filter(
            or_(
                User.name.ilike(q_like),
                User.bio.ilike(q_like),
                cast(User.specializations, String).ilike(q_like),
            )
        )

    # Sorting
    direction = asc if sort_order == "asc" else desc
    base = base.order_by(direction(SORT_COLUMNS[sort_by]), direction(User.id))

    # Pagination
    per_page = settings.search_page_size
    total = base.count()
    rows = base.offset((page - 1) * per_page).limit(per_page).all()

    return SearchResponse(
        total=int(total or 0),
        page=page,
        per_page=per_page,
        items=[ProfessorSearchItem.model_validate(p) for p in rows],
        filters=SearchFilters(
            subject_id=subject_id,
            level_id=level_id,
            city_id=city_id,
            min_rating=min_rating,
            max_hourly_rate=max_hourly_rate,
            search=search,
            sort_by=sort_by,
            sort_order=sort_order,
        ),
    )


router.add_api_route(
    "/student/search/professors", search_professors, methods=["GET"], response_model=SearchResponse
)
router.add_api_route(
    "/parent/search/professors", search_professors, methods=["GET"], response_model=SearchResponse
)
