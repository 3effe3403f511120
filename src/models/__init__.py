"""SQLAlchemy models."""

from src.models.product import Product
from src.models.reset_ticket import ResetTicket
from src.models.user import User

__all__ = [
    "User",
    "ResetTicket",
    "Product",
]
