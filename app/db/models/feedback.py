# app/db/models/feedback.py
from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Boolean, Text, Enum, Index, func
from sqlalchemy.orm import relationship
from app.db.base import Base
from app.core.enums import ModerationStatus, enum_values


class Feedback(Base):
    """Post-session rating, at most one per booking (checked before insert)."""

    __tablename__ = "feedback"
    __table_args__ = (
        Index("ix_feedback_student_created", "student_id", "created_at"),
        Index("ix_feedback_professor_created", "professor_id", "created_at"),
    )

    id = Column(Integer, primary_key=True, index=True)
    booking_id = Column(Integer, ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, index=True)
    professor_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    student_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    rating = Column(Integer, nullable=False)   # 1..5
    comment = Column(Text, nullable=True)
    would_recommend = Column(Boolean, nullable=False, default=False)

    status = Column(
        Enum(ModerationStatus, name="feedback_status", native_enum=False, values_callable=enum_values),
        nullable=False,
        default=ModerationStatus.PENDING,
        index=True,
    )

    # admin follow-up
    admin_response = Column(Text, nullable=True)
    is_resolved = Column(Boolean, nullable=False, default=False)
    resolved_by = Column(String, nullable=True)
    resolved_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    booking = relationship("Booking", foreign_keys=[booking_id])
    professor = relationship("User", foreign_keys=[professor_id])
    student = relationship("User", foreign_keys=[student_id])
