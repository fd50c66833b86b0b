# app/core/security.py
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.enums import RoleSlug
from app.core.exceptions import AuthenticationError, AuthorizationError
from app.db.base import get_db
from app.db.models.user import User

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
bearer_scheme = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return bool(pwd_context.verify(plain_password, hashed_password))
    except ValueError as e:
        logger.error(f"Error verifying password: {e}")
        return False


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    to_encode["exp"] = expire
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> Dict[str, Any]:
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Session expirée, veuillez vous reconnecter.")
    except jwt.PyJWTError:
        raise AuthenticationError("Jeton d'authentification invalide.")


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    if credentials is None:
        raise AuthenticationError()

    payload = decode_access_token(credentials.credentials)
    email = payload.get("sub")
    if not email:
        raise AuthenticationError("Jeton d'authentification invalide.")

    user = db.query(User).filter(User.email == email).first()
    if not user or not user.is_active:
        raise AuthenticationError("Utilisateur introuvable ou désactivé.")
    return user


def require_role(current_user: User, *slugs: RoleSlug) -> User:
    if not current_user or not any(current_user.has_role(slug) for slug in slugs):
        raise AuthorizationError("Vous n'avez pas accès à cet espace.")
    return current_user


def require_admin(current_user: User = Depends(get_current_user)) -> User:
    return require_role(current_user, RoleSlug.ADMIN)


def require_student(current_user: User = Depends(get_current_user)) -> User:
    return require_role(current_user, RoleSlug.STUDENT)


def require_parent(current_user: User = Depends(get_current_user)) -> User:
    return require_role(current_user, RoleSlug.PARENT)


def require_professor(current_user: User = Depends(get_current_user)) -> User:
    return require_role(current_user, RoleSlug.PROFESSOR)


def require_booker(current_user: User = Depends(get_current_user)) -> User:
    """Students and parents share the professor search."""
    return require_role(current_user, RoleSlug.STUDENT, RoleSlug.PARENT)
