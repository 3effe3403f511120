"""FastAPI dependencies for authentication, database and external clients."""

from typing import Annotated

from fastapi import Cookie, Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from src.database import get_db
from src.errors import InvalidSession
from src.models.user import User
from src.services.auth import SESSION_COOKIE_NAME, get_user_by_id, verify_access_token
from src.services.image_host import CloudinaryImageHost
from src.services.mailer import Mailer
from src.services.password_reset import PasswordResetService
from src.services.product_service import ProductService

security = HTTPBearer(auto_error=False)


def get_session_token(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    token: Annotated[str | None, Cookie(alias=SESSION_COOKIE_NAME)] = None,
) -> str | None:
    """Session token from the Authorization header, falling back to the cookie."""
    if credentials is not None:
        return credentials.credentials
    return token or None


def get_current_user(
    token: Annotated[str | None, Depends(get_session_token)],
    db: Annotated[Session, Depends(get_db)],
) -> User:
    """Get the current authenticated user from the session token."""
    if not token:
        raise InvalidSession("Not authorized, please login")

    user_id = verify_access_token(token)
    user = get_user_by_id(db, user_id)
    if user is None:
        raise InvalidSession("User not found")

    return user


def get_image_host(request: Request) -> CloudinaryImageHost:
    """Image host client created in the application lifespan."""
    return request.app.state.image_host


def get_mailer(request: Request) -> Mailer:
    """Mailer created in the application lifespan."""
    return request.app.state.mailer


def get_product_service(
    db: Annotated[Session, Depends(get_db)],
    image_host: Annotated[CloudinaryImageHost, Depends(get_image_host)],
) -> ProductService:
    """Get product service with dependencies."""
    return ProductService(db, image_host)


def get_password_reset_service(
    db: Annotated[Session, Depends(get_db)],
    mailer: Annotated[Mailer, Depends(get_mailer)],
) -> PasswordResetService:
    """Get password reset service with dependencies."""
    return PasswordResetService(db, mailer)
