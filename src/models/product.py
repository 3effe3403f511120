"""Product model."""

from sqlalchemy import JSON, Column, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship, validates

from src.database import Base
from src.errors import ValidationError
from src.models.mixins import TimestampMixin


class Product(Base, TimestampMixin):
    """Inventory item owned by exactly one user."""

    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    sku = Column(String(100), nullable=True)
    category = Column(String(255), nullable=False)
    quantity = Column(Integer, nullable=False)
    price = Column(Float, nullable=False)
    description = Column(Text, nullable=False)
    # {"file_name", "file_path", "file_type", "file_size"} or None
    image = Column(JSON, nullable=True)

    # Relationships
    owner = relationship("User", backref="products")

    @validates("name", "category", "description")
    def validate_text(self, key: str, value: str) -> str:
        if value is None or not str(value).strip():
            raise ValidationError(f"Please add a {key}")
        return str(value).strip()

    @validates("quantity", "price")
    def validate_non_negative(self, key: str, value):
        if value is None:
            raise ValidationError(f"Please add a {key}")
        if value < 0:
            raise ValidationError(f"{key.capitalize()} must not be negative")
        return value
