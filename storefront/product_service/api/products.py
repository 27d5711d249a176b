"""
Product API endpoints
"""
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from typing import List

from storefront.database import get_db
from storefront.product_service.cache import ProductListingCache, get_product_cache
from storefront.product_service.services.product_service import ProductService
from storefront.product_service.schemas.product import (
    ProductCreate,
    ProductUpdate,
    ProductResponse,
    ProductListResponse,
    MessageResponse
)

router = APIRouter(prefix="/api/products", tags=["products"])


def get_product_service(
    db: Session = Depends(get_db),
    cache: ProductListingCache = Depends(get_product_cache)
) -> ProductService:
    """Dependency to get ProductService instance"""
    return ProductService(db, cache)


@router.get(
    "",
    response_model=ProductListResponse,
    summary="Get all products"
)
def get_products(service: ProductService = Depends(get_product_service)):
    """
    Retrieve all active products, newest first

    The listing is cached for 5 minutes and invalidated by any product change.
    """
    return Response(content=service.get_all_products(), media_type="application/json")


@router.get("/category/{category}", response_model=List[ProductResponse], summary="Get products by category")
def get_products_by_category(
    category: str,
    service: ProductService = Depends(get_product_service)
):
    """
    Retrieve active products of one category

    - **category**: Category name
    """
    return service.get_products_by_category(category)


@router.get("/{product_id}", response_model=ProductResponse, summary="Get product by ID")
def get_product(
    product_id: int,
    service: ProductService = Depends(get_product_service)
):
    """
    Retrieve a specific active product by ID

    - **product_id**: Product ID
    """
    return service.get_product_by_id(product_id)


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED, summary="Create product")
def create_product(
    product_data: ProductCreate,
    service: ProductService = Depends(get_product_service)
):
    """
    Create a new product

    - **name**: Product name (required)
    - **price**: Product price (required, non-negative)
    - **stock_quantity**: Stock quantity (default 0)
    - **sku**: Unique SKU (optional)
    - **description**, **category**, **image_url**: Optional
    """
    return service.create_product(product_data)


@router.put("/{product_id}", response_model=ProductResponse, summary="Update product")
def update_product(
    product_id: int,
    product_data: ProductUpdate,
    service: ProductService = Depends(get_product_service)
):
    """
    Update an existing product

    All fields are optional. Only provided fields will be updated;
    **is_active** can re-enable a deleted product.
    """
    return service.update_product(product_id, product_data)


@router.delete("/{product_id}", response_model=MessageResponse, summary="Delete product")
def delete_product(
    product_id: int,
    service: ProductService = Depends(get_product_service)
):
    """
    Soft delete a product

    - **product_id**: Product ID
    """
    service.delete_product(product_id)
    return MessageResponse(message="Product deleted successfully")
