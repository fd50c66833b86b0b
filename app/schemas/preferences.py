# app/schemas/preferences.py
from pydantic import BaseModel
from typing import List

from app.schemas.common import ActionResponse, TaxonomyItem


class SubjectAttach(BaseModel):
    subject_id: int


class LevelAttach(BaseModel):
    level_id: int


class CityAttach(BaseModel):
    city_id: int


class PreferenceList(BaseModel):
    """Rows attached to the user, plus the full catalog for the picker."""
    selected: List[TaxonomyItem]
    available: List[TaxonomyItem]


class PreferenceActionResponse(ActionResponse):
    selected: List[TaxonomyItem]
