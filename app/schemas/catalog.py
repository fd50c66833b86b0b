# app/schemas/catalog.py
from pydantic import BaseModel
from typing import Optional


class SubjectResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None

    class Config:
        from_attributes = True


class LevelResponse(BaseModel):
    id: int
    name: str
    cycle: Optional[str] = None

    class Config:
        from_attributes = True


class CityResponse(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True
