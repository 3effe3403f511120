"""Product service: owner-scoped CRUD with image relay."""

import logging
from typing import Any

from sqlalchemy.orm import Session

from src.config import get_settings
from src.errors import NotFound, Unauthorized, UploadError, ValidationError
from src.models.product import Product
from src.schemas.product import ProductFields
from src.services.image_host import CloudinaryImageHost
from src.services.uploads import StagedUpload, format_file_size

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name", "category", "quantity", "price", "description")
UPDATABLE_FIELDS = ("name", "sku", "category", "quantity", "price", "description")


class ProductService:
    """Service for product-related operations."""

    def __init__(self, db: Session, image_host: CloudinaryImageHost):
        self.db = db
        self.image_host = image_host
        self.settings = get_settings()

    async def relay_image(self, staged: StagedUpload) -> dict[str, Any]:
        """Upload a staged image and describe it for the product record."""
        hosted = await self.image_host.upload(staged.path, folder=self.settings.image_folder)
        return {
            "file_name": staged.original_name,
            "file_path": hosted.secure_url,
            "file_type": staged.content_type,
            "file_size": format_file_size(staged.size, self.settings.file_size_precision),
        }

    async def create(
        self, user_id: int, fields: ProductFields, staged: StagedUpload | None = None
    ) -> Product:
        """Create a product owned by ``user_id``."""
        values = fields.model_dump()
        if any(values[field] in (None, "") for field in REQUIRED_FIELDS):
            raise ValidationError("Please fill in all fields")

        product = Product(
            user_id=user_id,
            name=values["name"],
            sku=values["sku"],
            category=values["category"],
            quantity=values["quantity"],
            price=values["price"],
            description=values["description"],
        )
        if staged:
            product.image = await self.relay_image(staged)

        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        logger.info(f"User {user_id} created product {product.id}")
        return product

    def list_products(self, user_id: int) -> list[Product]:
        """All products owned by the user, newest first."""
        return (
            self.db.query(Product)
            .filter(Product.user_id == user_id)
            .order_by(Product.created_at.desc(), Product.id.desc())
            .all()
        )

    def get(self, user_id: int, product_id: int) -> Product:
        """Get a product, checking that the user owns it."""
        product = self.db.query(Product).filter(Product.id == product_id).first()
        if not product:
            raise NotFound("Product not found")
        if product.user_id != user_id:
            raise Unauthorized("User not authorized")
        return product

    async def update(
        self,
        user_id: int,
        product_id: int,
        fields: ProductFields,
        staged: StagedUpload | None = None,
    ) -> Product:
        """Update supplied fields; keep the existing image unless a new one is uploaded."""
        product = self.get(user_id, product_id)

        changes = fields.model_dump(exclude_unset=True)
        try:
            for field in UPDATABLE_FIELDS:
                if changes.get(field) is not None:
                    # Model validators run on each assignment.
                    setattr(product, field, changes[field])
            # Only relay the image once every field has been accepted.
            if staged:
                product.image = await self.relay_image(staged)
        except (ValidationError, UploadError):
            self.db.rollback()
            raise

        self.db.commit()
        self.db.refresh(product)
        return product

    def delete(self, user_id: int, product_id: int) -> None:
        """Delete a product the user owns."""
        product = self.get(user_id, product_id)
        self.db.delete(product)
        self.db.commit()
        logger.info(f"User {user_id} deleted product {product_id}")
