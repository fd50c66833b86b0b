import os

# in-memory database shared by the app and the tests; must be set before app imports
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("SECRET_KEY", "test-secret-key")

from datetime import date, time, timedelta

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.core.enums import BookingStatus, BookingType, PaymentStatus, RoleSlug
from app.core.security import create_access_token, hash_password
from app.db.base import Base, SessionLocal, engine, get_db
from app.db.models.booking import Booking
from app.db.models.child import Child
from app.db.models.taxonomy import City, Level, Subject
from app.db.models.user import Role, User
from app.services.booking_pricing import compute_end_time, compute_total_price

PASSWORD = "motdepasse123"
# bcrypt is slow on purpose; hash once for every fixture user
PASSWORD_HASH = hash_password(PASSWORD)


@pytest.fixture
def db():
    """Fresh schema per test; the app uses this same session."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def _role(db, slug: RoleSlug) -> Role:
    role = db.query(Role).filter(Role.slug == slug.value).first()
    if not role:
        role = Role(name=slug.value.capitalize(), slug=slug.value)
        db.add(role)
        db.flush()
    return role


@pytest.fixture
def make_user(db):
    def _make(slug: RoleSlug, email: str, name: str, **profile) -> User:
        user = User(email=email, name=name, password_hash=PASSWORD_HASH, **profile)
        user.roles.append(_role(db, slug))
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def auth_headers():
    def _headers(user: User) -> dict:
        return {"Authorization": f"Bearer {create_access_token({'sub': user.email})}"}

    return _headers


@pytest.fixture
def taxonomy(db):
    rows = {
        "maths": Subject(name="Mathématiques"),
        "physique": Subject(name="Physique"),
        "college": Level(name="Collège", cycle="secondaire"),
        "lycee": Level(name="Lycée", cycle="secondaire"),
        "paris": City(name="Paris"),
        "lyon": City(name="Lyon"),
    }
    db.add_all(rows.values())
    db.commit()
    return rows


@pytest.fixture
def professor(make_user, taxonomy):
    return make_user(
        RoleSlug.PROFESSOR, "prof.martin@tutorat.fr", "Claire Martin",
        hourly_rate=40.0, bio="Agrégée de mathématiques", specializations=["algèbre", "analyse"],
    )


@pytest.fixture
def student(make_user):
    return make_user(RoleSlug.STUDENT, "eleve.dupont@tutorat.fr", "Lucas Dupont")


@pytest.fixture
def other_student(make_user):
    return make_user(RoleSlug.STUDENT, "eleve.bernard@tutorat.fr", "Emma Bernard")


@pytest.fixture
def parent(make_user):
    return make_user(RoleSlug.PARENT, "parent.leroy@tutorat.fr", "Sophie Leroy")


@pytest.fixture
def admin(make_user):
    return make_user(RoleSlug.ADMIN, "admin@tutorat.fr", "Admin")


@pytest.fixture
def child(db, parent):
    kid = Child(parent_id=parent.id, name="Hugo Leroy", grade="3e", age=14)
    db.add(kid)
    db.commit()
    db.refresh(kid)
    return kid


@pytest.fixture
def next_week():
    return date.today() + timedelta(days=7)


@pytest.fixture
def make_booking(db, taxonomy, next_week):
    def _make(
        professor: User,
        student: User = None,
        status: BookingStatus = BookingStatus.PENDING,
        payment_status: PaymentStatus = PaymentStatus.PENDING,
        day: date = None,
        start: time = time(14, 0),
        duration: int = 60,
        parent: User = None,
        child: Child = None,
    ) -> Booking:
        day = day or next_week
        booking = Booking(
            student_id=student.id if student else None,
            parent_id=parent.id if parent else None,
            child_id=child.id if child else None,
            professor_id=professor.id,
            subject_id=taxonomy["maths"].id,
            level_id=taxonomy["lycee"].id,
            date=day,
            start_time=start,
            end_time=compute_end_time(day, start, duration),
            duration=duration,
            total_price=compute_total_price(professor.hourly_rate, duration),
            status=status,
            payment_status=payment_status,
            booking_type=BookingType.PARENT_CHILD if parent else BookingType.STUDENT_DIRECT,
        )
        db.add(booking)
        db.commit()
        db.refresh(booking)
        return booking

    return _make
