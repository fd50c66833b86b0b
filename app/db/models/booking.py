from sqlalchemy import Column, Integer, String, ForeignKey, Date, Time, Float, DateTime, Text, Enum, Index
from sqlalchemy.orm import relationship
from datetime import datetime
from app.db.base import Base
from app.core.enums import (
    BookingStatus,
    BookingType,
    CancelledBy,
    PaymentMethod,
    PaymentStatus,
    enum_values,
)


def _enum_column(enum_cls, name, **kwargs):
    return Column(
        Enum(enum_cls, name=name, native_enum=False, values_callable=enum_values, validate_strings=True),
        **kwargs,
    )


class Booking(Base):
    __tablename__ = "bookings"
    __table_args__ = (
        Index("ix_bookings_student_created", "student_id", "created_at"),
        Index("ix_bookings_professor_date", "professor_id", "date"),
    )

    id = Column(Integer, primary_key=True, index=True)

    # who booked: a student directly, or a parent for one of their children
    student_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=True)
    parent_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=True)
    child_id = Column(Integer, ForeignKey("children.id", ondelete="SET NULL"), nullable=True)
    professor_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    subject_id = Column(Integer, ForeignKey("subjects.id"), nullable=False)
    level_id = Column(Integer, ForeignKey("levels.id"), nullable=False)

    date = Column(Date, nullable=False)
    start_time = Column(Time, nullable=False)
    # time of day only; a session running past midnight wraps (23:30 + 60min -> 00:30)
    end_time = Column(Time, nullable=False)
    duration = Column(Integer, nullable=False)  # minutes

    total_price = Column(Float, nullable=False)

    status = _enum_column(BookingStatus, "booking_status", nullable=False, default=BookingStatus.PENDING)
    payment_status = _enum_column(PaymentStatus, "payment_status", nullable=False, default=PaymentStatus.PENDING)
    payment_method = _enum_column(PaymentMethod, "payment_method", nullable=True)
    booking_type = _enum_column(BookingType, "booking_type", nullable=False, default=BookingType.STUDENT_DIRECT)

    notes = Column(Text, nullable=True)
    admin_notes = Column(Text, nullable=True)
    transaction_id = Column(String, nullable=True)

    confirmed_at = Column(DateTime, nullable=True)
    completed_at = Column(DateTime, nullable=True)
    cancelled_at = Column(DateTime, nullable=True)
    cancellation_reason = Column(String(500), nullable=True)
    cancelled_by = _enum_column(CancelledBy, "cancelled_by", nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # relationships
    student = relationship("User", foreign_keys=[student_id])
    parent = relationship("User", foreign_keys=[parent_id])
    child = relationship("Child", foreign_keys=[child_id])
    professor = relationship("User", foreign_keys=[professor_id])
    subject = relationship("Subject", foreign_keys=[subject_id])
    level = relationship("Level", foreign_keys=[level_id])
