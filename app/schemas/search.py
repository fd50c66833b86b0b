# app/schemas/search.py
from pydantic import BaseModel
from typing import List, Literal, Optional

from app.schemas.common import TaxonomyItem

SortBy = Literal["rating", "price", "name"]
SortOrder = Literal["asc", "desc"]


class ProfessorSearchItem(BaseModel):
    id: int
    name: str
    bio: Optional[str] = None
    hourly_rate: Optional[float] = None
    rating: float = 0.0
    total_reviews: int = 0
    experience_years: Optional[int] = None
    specializations: Optional[List[str]] = None
    is_verified: bool = False
    subjects: List[TaxonomyItem] = []
    levels: List[TaxonomyItem] = []
    cities: List[TaxonomyItem] = []

    class Config:
        from_attributes = True


class SearchFilters(BaseModel):
    subject_id: Optional[int] = None
    level_id: Optional[int] = None
    city_id: Optional[int] = None
    min_rating: Optional[float] = None
    max_hourly_rate: Optional[float] = None
    search: Optional[str] = None
    sort_by: SortBy = "rating"
    sort_order: SortOrder = "desc"


class SearchResponse(BaseModel):
    total: int
    page: int
    per_page: int
    items: List[ProfessorSearchItem]
    filters: SearchFilters
