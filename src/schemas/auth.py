"""Authentication and user profile schemas."""

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from src.models.user import BIO_MAX_LENGTH


class UserRegister(BaseModel):
    """User registration request.

    Fields are optional here so that missing values are reported by the
    credential store with its own messages.
    """

    name: str | None = Field(None, max_length=255)
    email: EmailStr | None = Field(None, max_length=255)
    password: str | None = Field(None, max_length=128)


class UserLogin(BaseModel):
    """User login request."""

    email: str | None = Field(None, max_length=255)
    password: str | None = Field(None, max_length=128)


class UserUpdate(BaseModel):
    """Profile update request. Email and password are not updatable here."""

    name: str | None = Field(None, min_length=1, max_length=255)
    phone: str | None = Field(None, max_length=50)
    bio: str | None = Field(None, max_length=BIO_MAX_LENGTH)
    photo: str | None = Field(None, max_length=1024)


class ChangePassword(BaseModel):
    """Change password request."""

    old_password: str | None = Field(None, alias="oldPassword", max_length=128)
    password: str | None = Field(None, max_length=128)

    model_config = ConfigDict(populate_by_name=True)


class ForgotPassword(BaseModel):
    """Forgot password request."""

    email: str | None = Field(None, max_length=255)


class ResetPassword(BaseModel):
    """Reset password request."""

    password: str | None = Field(None, max_length=128)


class UserResponse(BaseModel):
    """User information response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    photo: str
    phone: str
    bio: str


class AuthResponse(UserResponse):
    """Profile plus the freshly issued session token."""

    token: str


class MessageResponse(BaseModel):
    """Plain confirmation message."""

    message: str


class DeliveryResponse(BaseModel):
    """Outcome of an operation that sent an email."""

    success: bool
    message: str
