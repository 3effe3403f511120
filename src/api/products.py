"""Product API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from src.api.dependencies import get_current_user, get_product_service
from src.models.user import User
from src.schemas.auth import MessageResponse
from src.schemas.product import ProductFields, ProductResponse
from src.services.product_service import ProductService
from src.services.uploads import stage_upload

router = APIRouter(prefix="/api/products", tags=["products"])


def product_form(
    name: Annotated[str | None, Form()] = None,
    sku: Annotated[str | None, Form()] = None,
    category: Annotated[str | None, Form()] = None,
    quantity: Annotated[int | None, Form()] = None,
    price: Annotated[float | None, Form()] = None,
    description: Annotated[str | None, Form()] = None,
) -> ProductFields:
    """Collect product fields from a multipart or urlencoded form."""
    submitted = {
        "name": name,
        "sku": sku,
        "category": category,
        "quantity": quantity,
        "price": price,
        "description": description,
    }
    return ProductFields(**{key: value for key, value in submitted.items() if value is not None})


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    fields: Annotated[ProductFields, Depends(product_form)],
    current_user: Annotated[User, Depends(get_current_user)],
    product_service: Annotated[ProductService, Depends(get_product_service)],
    image: Annotated[UploadFile | None, File(description="Product image (PNG or JPEG)")] = None,
):
    """Create a product, relaying an optional image to the image host."""
    staged = await stage_upload(image)
    return await product_service.create(current_user.id, fields, staged)


@router.get("", response_model=list[ProductResponse])
async def get_products(
    current_user: Annotated[User, Depends(get_current_user)],
    product_service: Annotated[ProductService, Depends(get_product_service)],
):
    """Get all products owned by the current user, newest first."""
    return product_service.list_products(current_user.id)


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(
    product_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    product_service: Annotated[ProductService, Depends(get_product_service)],
):
    """Get a specific product."""
    return product_service.get(current_user.id, product_id)


@router.delete("/{product_id}", response_model=MessageResponse)
async def delete_product(
    product_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    product_service: Annotated[ProductService, Depends(get_product_service)],
):
    """Delete a product."""
    product_service.delete(current_user.id, product_id)
    return MessageResponse(message="Product deleted.")


@router.patch("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: int,
    fields: Annotated[ProductFields, Depends(product_form)],
    current_user: Annotated[User, Depends(get_current_user)],
    product_service: Annotated[ProductService, Depends(get_product_service)],
    image: Annotated[UploadFile | None, File(description="Product image (PNG or JPEG)")] = None,
):
    """Update a product. Without a new image the stored one is kept."""
    staged = await stage_upload(image)
    return await product_service.update(current_user.id, product_id, fields, staged)
