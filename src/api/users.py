"""User account API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from src.api.dependencies import get_current_user, get_password_reset_service, get_session_token
from src.database import get_db
from src.models.user import User
from src.schemas.auth import (
    AuthResponse,
    ChangePassword,
    DeliveryResponse,
    ForgotPassword,
    MessageResponse,
    ResetPassword,
    UserLogin,
    UserRegister,
    UserResponse,
    UserUpdate,
)
from src.services.auth import (
    authenticate_user,
    change_password,
    clear_session_cookie,
    create_access_token,
    is_logged_in,
    register_user,
    set_session_cookie,
    update_profile,
)
from src.services.password_reset import PasswordResetService

router = APIRouter(prefix="/api/users", tags=["users"])


def _auth_response(user: User, token: str) -> AuthResponse:
    return AuthResponse(**UserResponse.model_validate(user).model_dump(), token=token)


@router.post("", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserRegister,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
):
    """Register a new user and start a session."""
    user = register_user(db, user_data.name, user_data.email, user_data.password)

    token = create_access_token(user.id)
    set_session_cookie(response, token)

    return _auth_response(user, token)


@router.post("/login", response_model=AuthResponse)
async def login(
    credentials: UserLogin,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
):
    """Login with email and password."""
    user = authenticate_user(db, credentials.email, credentials.password)

    token = create_access_token(user.id)
    set_session_cookie(response, token)

    return _auth_response(user, token)


@router.get("/logout", response_model=MessageResponse)
async def logout(response: Response):
    """Clear the session cookie."""
    clear_session_cookie(response)
    return MessageResponse(message="Successfully logged out")


@router.get("", response_model=UserResponse)
async def get_user(
    current_user: Annotated[User, Depends(get_current_user)],
):
    """Get current user information."""
    return current_user


@router.get("/loggedin", response_model=bool)
async def login_status(
    token: Annotated[str | None, Depends(get_session_token)],
):
    """Whether the request carries a valid session."""
    return is_logged_in(token)


@router.patch("", response_model=UserResponse)
async def update_user(
    user_data: UserUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Update the current user's profile."""
    return update_profile(db, current_user, user_data.model_dump(exclude_unset=True))


@router.patch("/changepassword", response_model=MessageResponse)
async def change_user_password(
    passwords: ChangePassword,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Change the current user's password."""
    change_password(db, current_user, passwords.old_password, passwords.password)
    return MessageResponse(message="Password changed successfully")


@router.post("/forgotpassword", response_model=DeliveryResponse)
async def forgot_password(
    request_data: ForgotPassword,
    reset_service: Annotated[PasswordResetService, Depends(get_password_reset_service)],
):
    """Email a password reset link."""
    await reset_service.forgot_password(request_data.email)
    return DeliveryResponse(success=True, message="Reset email sent")


@router.put("/resetpassword/{reset_token}", response_model=MessageResponse)
async def reset_password(
    reset_token: str,
    request_data: ResetPassword,
    reset_service: Annotated[PasswordResetService, Depends(get_password_reset_service)],
):
    """Set a new password using a reset token."""
    reset_service.reset_password(reset_token, request_data.password)
    return MessageResponse(message="Password Reset successfully, please login.")
