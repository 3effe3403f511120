"""User model."""

from sqlalchemy import Column, Integer, String, event, inspect

from src.database import Base
from src.models.mixins import TimestampMixin

DEFAULT_PHOTO = "https://i.ibb.co/4pDNDk1/avatar.png"
DEFAULT_PHONE = "+1"
DEFAULT_BIO = "bio"
BIO_MAX_LENGTH = 250


class User(Base, TimestampMixin):
    """User model for authentication and product ownership."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password = Column(String(255), nullable=False)  # bcrypt hash once persisted
    photo = Column(String(1024), nullable=False, default=DEFAULT_PHOTO)
    phone = Column(String(50), nullable=False, default=DEFAULT_PHONE)
    bio = Column(String(BIO_MAX_LENGTH), nullable=False, default=DEFAULT_BIO)


@event.listens_for(User, "before_insert")
def _hash_password_on_insert(mapper, connection, target: User) -> None:
    from src.services.auth import get_password_hash

    target.password = get_password_hash(target.password)


@event.listens_for(User, "before_update")
def _hash_password_on_update(mapper, connection, target: User) -> None:
    # Only a newly assigned plaintext gets hashed; untouched hashes are kept.
    if not inspect(target).attrs.password.history.has_changes():
        return

    from src.services.auth import get_password_hash

    target.password = get_password_hash(target.password)
