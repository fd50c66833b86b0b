# app/schemas/child.py
from pydantic import BaseModel, Field
from typing import Optional


class ChildCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    grade: Optional[str] = Field(default=None, max_length=100)
    age: Optional[int] = Field(default=None, ge=3, le=25)
    notes: Optional[str] = Field(default=None, max_length=1000)


class ChildResponse(ChildCreate):
    id: int
    parent_id: int

    class Config:
        from_attributes = True
