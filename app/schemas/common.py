# app/schemas/common.py
from pydantic import BaseModel
from typing import Optional


class Flash(BaseModel):
    success: Optional[str] = None
    error: Optional[str] = None


class ActionResponse(BaseModel):
    """What a form submission answers: a flash message and where to go next."""
    flash: Flash
    redirect_to: Optional[str] = None


class PageMeta(BaseModel):
    total: int
    page: int
    per_page: int


class SimpleUser(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True


class TaxonomyItem(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True
