"""Identity: password hashing and JWT bearer tokens.

The inventory core only consumes the resulting ``(user_id, role)`` pair;
nothing here knows about households.
"""

import logging
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from homestock.config import get_settings
from homestock.exceptions import ValidationError
from homestock.models.user import User

logger = logging.getLogger(__name__)
settings = get_settings()

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def check_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)


def issue_token(user: User) -> str:
    """Signed access token identifying ``user``."""
    claims = {
        "sub": str(user.id),
        "email": user.email,
        "exp": datetime.now(UTC) + timedelta(minutes=settings.jwt_expiration_minutes),
    }
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def read_token(token: str) -> int | None:
    """User id carried by a valid token, or None."""
    try:
        claims = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None
    subject = claims.get("sub")
    if subject is None or not str(subject).isdigit():
        return None
    return int(subject)


def find_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == email.lower()).first()


def register_user(db: Session, email: str, password: str, name: str | None = None) -> User:
    if find_user_by_email(db, email) is not None:
        raise ValidationError("Email already registered")
    user = User(email=email.lower(), password_hash=hash_password(password), name=name)
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"Registered user {user.id}")
    return user


def authenticate(db: Session, email: str, password: str) -> User | None:
    user = find_user_by_email(db, email)
    if user is None or not check_password(password, user.password_hash):
        return None
    return user
