# app/api/routes/auth.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.exceptions import AuthenticationError, BusinessRuleError
from app.core.logging_utils import log_business_event
from app.core.security import create_access_token, get_current_user, hash_password, verify_password
from app.db.base import get_db
from app.db.models.user import Role, User
from app.schemas.user import LoginRequest, TokenResponse, UserCreate, UserResponse

router = APIRouter()


def get_or_create_role(db: Session, slug: str) -> Role:
    role = db.query(Role).filter(Role.slug == slug).first()
    if not role:
        role = Role(name=slug.capitalize(), slug=slug)
        db.add(role)
        db.flush()
    return role


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register(user: UserCreate, db: Session = Depends(get_db)):
    existing = db.query(User).filter(User.email == user.email).first()
    if existing:
        raise BusinessRuleError("Cette adresse e-mail est déjà utilisée.")

    new_user = User(
        email=user.email,
        name=user.name,
        password_hash=hash_password(user.password),
    )
    new_user.roles.append(get_or_create_role(db, user.role))

    db.add(new_user)
    db.commit()
    db.refresh(new_user)

    log_business_event("user_registered", "user", new_user.id, new_user.id, {"role": user.role})
    return new_user


@router.post("/login", response_model=TokenResponse)
def login(credentials: LoginRequest, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == credentials.email).first()

    if not user or not verify_password(credentials.password, user.password_hash):
        raise AuthenticationError("Identifiants invalides.")
    if not user.is_active:
        raise AuthenticationError("Ce compte est désactivé.")

    token = create_access_token({"sub": user.email})

    return TokenResponse(access_token=token)


@router.get("/me", response_model=UserResponse)
def me(current_user: User = Depends(get_current_user)):
    return current_user
