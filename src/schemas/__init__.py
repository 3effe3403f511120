"""Pydantic schemas for API requests and responses."""

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
from src.schemas.contact import ContactMessage
from src.schemas.product import ImageDescriptor, ProductFields, ProductResponse

__all__ = [
    "UserRegister",
    "UserLogin",
    "UserUpdate",
    "UserResponse",
    "AuthResponse",
    "ChangePassword",
    "DeliveryResponse",
    "ForgotPassword",
    "ResetPassword",
    "MessageResponse",
    "ContactMessage",
    "ProductFields",
    "ImageDescriptor",
    "ProductResponse",
]
