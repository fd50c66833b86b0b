import datetime as dt
from pydantic import BaseModel, Field, field_validator
from typing import List, Optional

from app.core.enums import BookingStatus, BookingType, PaymentMethod, PaymentStatus
from app.schemas.common import ActionResponse, PageMeta, SimpleUser, TaxonomyItem
from app.services.booking_pricing import MAX_DURATION, MIN_DURATION


def _parse_hhmm(value):
    if isinstance(value, dt.time):
        return value.replace(second=0, microsecond=0)
    if isinstance(value, str):
        try:
            return dt.datetime.strptime(value, "%H:%M").time()
        except ValueError:
            pass
    raise ValueError("start_time must use the HH:MM format")


# --- shared slot fields (create + update) ---
class BookingSlot(BaseModel):
    subject_id: int
    level_id: int
    date: dt.date
    start_time: dt.time
    duration: int = Field(..., ge=MIN_DURATION, le=MAX_DURATION, description="minutes")

    @field_validator("start_time", mode="before")
    @classmethod
    def check_start_time(cls, v):
        return _parse_hhmm(v)

    @field_validator("date")
    @classmethod
    def check_date_after_today(cls, v: dt.date) -> dt.date:
        if v <= dt.date.today():
            raise ValueError("date must be after today")
        return v


# --- CREATE (student) ---
class BookingCreate(BookingSlot):
    professor_id: int
    notes: Optional[str] = Field(default=None, max_length=1000)


# --- CREATE (parent, for a child) ---
class ParentBookingCreate(BookingSlot):
    professor_id: int
    child_id: int
    payment_method: PaymentMethod
    notes: Optional[str] = Field(default=None, max_length=500)


# --- UPDATE (student); the professor cannot be changed ---
class BookingUpdate(BookingSlot):
    notes: Optional[str] = Field(default=None, max_length=1000)


# --- UPDATE (parent); the child may change, the professor may not ---
class ParentBookingUpdate(BookingSlot):
    child_id: int
    notes: Optional[str] = Field(default=None, max_length=500)


class ProfessorCancel(BaseModel):
    cancellation_reason: str = Field(..., min_length=1, max_length=500)


# --- RESPONSE ---
class BookingResponse(BaseModel):
    id: int
    student_id: Optional[int]
    parent_id: Optional[int]
    child_id: Optional[int]
    professor_id: int
    subject_id: int
    level_id: int
    date: dt.date
    start_time: dt.time
    end_time: dt.time
    duration: int
    total_price: float
    status: BookingStatus
    payment_status: PaymentStatus
    payment_method: Optional[PaymentMethod] = None
    booking_type: BookingType
    notes: Optional[str]
    cancellation_reason: Optional[str] = None
    created_at: dt.datetime
    updated_at: Optional[dt.datetime]

    class Config:
        from_attributes = True


class BookingDetail(BookingResponse):
    professor: SimpleUser
    subject: TaxonomyItem
    level: TaxonomyItem
    student: Optional[SimpleUser] = None
    parent: Optional[SimpleUser] = None
    child_name: Optional[str] = None
    # end_time carries no date: true when the session wraps past midnight
    ends_next_day: bool = False


class BookingActionResponse(ActionResponse):
    booking: BookingResponse


class BookingPage(PageMeta):
    items: List[BookingDetail]
