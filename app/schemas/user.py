from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import List, Literal, Optional

from app.schemas.common import ActionResponse, TaxonomyItem


class UserCreate(BaseModel):
    email: EmailStr
    name: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=8, max_length=72)
    role: Literal["student", "parent", "professor"] = "student"


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class UserResponse(BaseModel):
    id: int
    email: EmailStr
    name: str
    roles: List[str] = Field(default_factory=list, validation_alias="role_slugs")
    hourly_rate: Optional[float] = None

    class Config:
        from_attributes = True


# --- professor profile ---
class ProfessorProfileUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=30)
    bio: Optional[str] = Field(default=None, max_length=2000)
    hourly_rate: Optional[float] = Field(default=None, ge=0)
    experience_years: Optional[int] = Field(default=None, ge=0, le=80)
    education: Optional[str] = Field(default=None, max_length=255)
    specializations: Optional[List[str]] = None
    languages: Optional[List[str]] = None
    # replace the whole teaching profile when given
    subject_ids: Optional[List[int]] = None
    level_ids: Optional[List[int]] = None
    city_ids: Optional[List[int]] = None

    @field_validator("name")
    @classmethod
    def name_not_null(cls, v):
        if v is None:
            raise ValueError("name cannot be empty")
        return v


class ProfessorProfileStats(BaseModel):
    total_hours_taught: float
    total_students: int
    average_rating: float
    total_reviews: int


class ProfessorProfileResponse(BaseModel):
    id: int
    email: EmailStr
    name: str
    phone: Optional[str] = None
    bio: Optional[str] = None
    hourly_rate: Optional[float] = None
    experience_years: Optional[int] = None
    education: Optional[str] = None
    specializations: Optional[List[str]] = None
    languages: Optional[List[str]] = None
    rating: float
    total_reviews: int
    subjects: List[TaxonomyItem] = Field(default_factory=list)
    levels: List[TaxonomyItem] = Field(default_factory=list)
    cities: List[TaxonomyItem] = Field(default_factory=list)

    class Config:
        from_attributes = True


class ProfessorProfilePage(BaseModel):
    profile: ProfessorProfileResponse
    stats: ProfessorProfileStats


class ProfessorProfileActionResponse(ActionResponse):
    profile: ProfessorProfileResponse
