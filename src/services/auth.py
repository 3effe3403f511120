"""Authentication service for JWT sessions and credential handling."""

import logging
from datetime import UTC, datetime, timedelta

from fastapi import Response
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from src.config import get_settings
from src.errors import Conflict, InvalidSession, NotFound, Unauthorized, ValidationError
from src.models.user import User

logger = logging.getLogger(__name__)

settings = get_settings()

SESSION_COOKIE_NAME = "token"
MIN_PASSWORD_LENGTH = 6

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


def create_access_token(user_id: int) -> str:
    """Create a signed session token for a user."""
    expire = datetime.now(UTC) + timedelta(minutes=settings.jwt_expiration_minutes)
    to_encode = {
        "sub": str(user_id),
        "exp": expire,
    }
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_access_token(token: str) -> int:
    """Return the user id carried by a session token.

    Raises InvalidSession when the signature is wrong, the token has expired
    or the subject is malformed.
    """
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        raise InvalidSession("Not authorized, please login") from e

    subject = payload.get("sub")
    try:
        return int(subject)
    except (TypeError, ValueError) as e:
        raise InvalidSession("Not authorized, please login") from e


def set_session_cookie(response: Response, token: str) -> None:
    """Attach the session token as an HTTP-only cookie valid for one day."""
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=token,
        path="/",
        httponly=True,
        max_age=settings.jwt_expiration_minutes * 60,
        expires=datetime.now(UTC) + timedelta(minutes=settings.jwt_expiration_minutes),
        samesite="none",
        secure=settings.cookie_secure,
    )


def clear_session_cookie(response: Response) -> None:
    """Replace the session cookie with an empty, already expired one."""
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value="",
        path="/",
        httponly=True,
        max_age=0,
        expires=datetime(1970, 1, 1, tzinfo=UTC),
        samesite="none",
        secure=settings.cookie_secure,
    )


def is_logged_in(token: str | None) -> bool:
    """Login status: no token is simply logged out, a bad token is an error."""
    if not token:
        return False
    verify_access_token(token)
    return True


def normalize_email(email: str) -> str:
    """Trim and lowercase the domain part, matching how EmailStr stores it."""
    local, sep, domain = email.strip().rpartition("@")
    if not sep:
        return email.strip()
    return f"{local}@{domain.lower()}"


def get_user_by_email(db: Session, email: str) -> User | None:
    """Get a user by email."""
    return db.query(User).filter(User.email == normalize_email(email)).first()


def get_user_by_id(db: Session, user_id: int) -> User | None:
    """Get a user by id."""
    return db.query(User).filter(User.id == user_id).first()


def register_user(
    db: Session, name: str | None, email: str | None, password: str | None
) -> User:
    """Create a new user. The password is hashed by the model's write hook."""
    if not name or not email or not password:
        raise ValidationError("Please fill in all required fields")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError("Password must be up to 6 characters")

    if get_user_by_email(db, email):
        raise Conflict("Email has already been used.")

    user = User(name=name, email=normalize_email(email), password=password)
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"Registered user {user.id}")
    return user


def authenticate_user(db: Session, email: str | None, password: str | None) -> User:
    """Authenticate a user by email and password."""
    if not email or not password:
        raise ValidationError("Please provide email and password")

    user = get_user_by_email(db, email)
    if not user:
        raise NotFound("User not found, please sign up")
    if not verify_password(password, user.password):
        raise Unauthorized("Invalid email or password")
    return user


def update_profile(db: Session, user: User, changes: dict) -> User:
    """Apply profile changes (name, phone, bio, photo)."""
    for field in ("name", "phone", "bio", "photo"):
        if changes.get(field) is not None:
            setattr(user, field, changes[field])
    db.commit()
    db.refresh(user)
    return user


def change_password(
    db: Session, user: User | None, old_password: str | None, new_password: str | None
) -> User:
    """Replace a user's password after checking the current one."""
    if user is None:
        raise NotFound("User not found, please sign up")
    if not old_password or not new_password:
        raise ValidationError("Please add old and new password")
    if len(new_password) < MIN_PASSWORD_LENGTH:
        raise ValidationError("Password must be up to 6 characters")
    if not verify_password(old_password, user.password):
        raise Unauthorized("Old password is incorrect")

    user.password = new_password
    db.commit()
    db.refresh(user)
    return user
