# app/db/models/user.py
from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    JSON,
    String,
    Table,
    Text,
    func,
)
from sqlalchemy.orm import relationship
from app.db.base import Base


def _association(name: str, target_table: str, target_column: str) -> Table:
    return Table(
        name,
        Base.metadata,
        Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
        Column(target_column, Integer, ForeignKey(f"{target_table}.id", ondelete="CASCADE"), primary_key=True),
    )


user_roles = _association("user_roles", "roles", "role_id")

# what a professor teaches, and where
professor_subjects = _association("professor_subjects", "subjects", "subject_id")
professor_levels = _association("professor_levels", "levels", "level_id")
professor_cities = _association("professor_cities", "cities", "city_id")

# what a student is looking for
student_subjects = _association("student_subjects", "subjects", "subject_id")
student_levels = _association("student_levels", "levels", "level_id")
student_cities = _association("student_cities", "cities", "city_id")


class Role(Base):
    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    slug = Column(String, nullable=False, unique=True, index=True)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=False)
    password_hash = Column(String, nullable=False)
    phone = Column(String, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # professor profile
    bio = Column(Text, nullable=True)
    hourly_rate = Column(Float, nullable=True)
    experience_years = Column(Integer, default=0)
    education = Column(String, nullable=True)
    specializations = Column(JSON, nullable=True)
    languages = Column(JSON, nullable=True)
    is_verified = Column(Boolean, default=False)
    is_available = Column(Boolean, default=True)
    rating = Column(Float, nullable=False, default=0.0)
    total_reviews = Column(Integer, nullable=False, default=0)

    # student profile
    age = Column(Integer, nullable=True)
    grade_level = Column(String, nullable=True)
    school = Column(String, nullable=True)
    learning_goals = Column(Text, nullable=True)

    roles = relationship("Role", secondary=user_roles, lazy="selectin")

    subjects = relationship("Subject", secondary=professor_subjects, lazy="selectin")
    levels = relationship("Level", secondary=professor_levels, lazy="selectin")
    cities = relationship("City", secondary=professor_cities, lazy="selectin")

    preferred_subjects = relationship("Subject", secondary=student_subjects, lazy="selectin")
    preferred_levels = relationship("Level", secondary=student_levels, lazy="selectin")
    preferred_cities = relationship("City", secondary=student_cities, lazy="selectin")

    children = relationship("Child", back_populates="parent", lazy="selectin")

    def has_role(self, slug) -> bool:
        slug = getattr(slug, "value", slug)
        return any(role.slug == slug for role in self.roles)

    @property
    def role_slugs(self):
        return [role.slug for role in self.roles]
