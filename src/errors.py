"""Application error types and their HTTP mapping."""

from enum import StrEnum

from fastapi import status


class ErrorKind(StrEnum):
    """Kinds of failure a service can report."""

    VALIDATION = "validation"
    CONFLICT = "conflict"
    UNAUTHORIZED = "unauthorized"
    INVALID_SESSION = "invalid_session"
    NOT_FOUND = "not_found"
    INVALID_OR_EXPIRED_TOKEN = "invalid_or_expired_token"
    UPLOAD = "upload"
    EMAIL_DELIVERY = "email_delivery"


STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.CONFLICT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.INVALID_SESSION: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.INVALID_OR_EXPIRED_TOKEN: status.HTTP_404_NOT_FOUND,
    ErrorKind.UPLOAD: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorKind.EMAIL_DELIVERY: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class AppError(Exception):
    """Base error carrying a kind and a client-facing message."""

    kind: ErrorKind = ErrorKind.VALIDATION

    def __init__(self, message: str, kind: ErrorKind | None = None):
        super().__init__(message)
        self.message = message
        if kind is not None:
            self.kind = kind

    @property
    def status_code(self) -> int:
        return STATUS_BY_KIND[self.kind]


class ValidationError(AppError):
    kind = ErrorKind.VALIDATION


class Conflict(AppError):
    kind = ErrorKind.CONFLICT


class Unauthorized(AppError):
    kind = ErrorKind.UNAUTHORIZED


class InvalidSession(AppError):
    kind = ErrorKind.INVALID_SESSION


class NotFound(AppError):
    kind = ErrorKind.NOT_FOUND


class InvalidOrExpiredToken(AppError):
    """Same status and message for expired, consumed and never-issued tokens."""

    kind = ErrorKind.INVALID_OR_EXPIRED_TOKEN

    def __init__(self, message: str = "Invalid or Expired Token"):
        super().__init__(message)


class UploadError(AppError):
    kind = ErrorKind.UPLOAD


class EmailDeliveryError(AppError):
    kind = ErrorKind.EMAIL_DELIVERY
