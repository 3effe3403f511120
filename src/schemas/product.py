"""Product schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class ProductFields(BaseModel):
    """Product fields as submitted by the client (multipart form)."""

    name: str | None = None
    sku: str | None = None
    category: str | None = None
    quantity: int | None = None
    price: float | None = None
    description: str | None = None


class ImageDescriptor(BaseModel):
    """Hosted image attached to a product."""

    file_name: str
    file_path: str
    file_type: str
    file_size: str


class ProductResponse(BaseModel):
    """Product response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    name: str
    sku: str | None
    category: str
    quantity: int
    price: float
    description: str
    image: ImageDescriptor | None
    created_at: datetime
    updated_at: datetime
