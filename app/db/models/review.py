# app/db/models/review.py
from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Boolean, Text, Enum, Index, func
from sqlalchemy.orm import relationship
from app.db.base import Base
from app.core.enums import ModerationStatus, enum_values


class Review(Base):
    __tablename__ = "reviews"
    # one review per (professor, student) is enforced by the create handler, not the schema
    __table_args__ = (
        Index("ix_reviews_professor_created", "professor_id", "created_at"),
        Index("ix_reviews_student_created", "student_id", "created_at"),
    )

    id = Column(Integer, primary_key=True, index=True)
    professor_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    student_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    rating = Column(Integer, nullable=False)   # 1..5
    title = Column(String(255), nullable=False)
    comment = Column(Text, nullable=False)
    would_recommend = Column(Boolean, nullable=False, default=False)

    # admin side
    moderation_status = Column(
        Enum(ModerationStatus, name="moderation_status", native_enum=False, values_callable=enum_values),
        nullable=False,
        default=ModerationStatus.PENDING,
        index=True,
    )
    is_verified = Column(Boolean, nullable=False, default=False)
    is_featured = Column(Boolean, nullable=False, default=False)
    admin_notes = Column(String(500), nullable=True)
    moderated_by = Column(String, nullable=True)
    moderated_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # relationships (helpful for response shaping)
    professor = relationship("User", foreign_keys=[professor_id])
    student = relationship("User", foreign_keys=[student_id])
