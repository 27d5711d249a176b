"""
Product Service - Business Logic Layer
"""
import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.database import atomic
from storefront.errors import ConflictError, NotFoundError
from storefront.product_service.cache import ProductListingCache
from storefront.product_service.repositories.product_repository import ProductRepository
from storefront.product_service.schemas.product import (
    ProductCreate,
    ProductUpdate,
    ProductResponse,
    ProductListResponse
)

logger = logging.getLogger(__name__)


class ProductService:
    """Service layer for product business logic"""

    def __init__(self, db: Session, cache: Optional[ProductListingCache] = None):
        self.db = db
        self.repository = ProductRepository(db)
        self.cache = cache or ProductListingCache(None)

    def get_all_products(self) -> str:
        """
        Serialized listing of active products

        Served from the cache when present; on a miss the store is queried
        and the result cached for the configured TTL.
        """
        cached = self.cache.get()
        if cached is not None:
            return cached

        generation = self.cache.generation()
        products = self.repository.get_all_active()
        payload = ProductListResponse(
            products=[ProductResponse.model_validate(p) for p in products],
            total=len(products)
        ).model_dump_json()

        self.cache.set(payload, generation)
        return payload

    def get_product_by_id(self, product_id: int) -> ProductResponse:
        """Get active product by ID"""
        product = self.repository.get_active_by_id(product_id)
        if not product:
            raise NotFoundError("Product not found")
        return ProductResponse.model_validate(product)

    def get_products_by_category(self, category: str) -> List[ProductResponse]:
        """Get active products in a category"""
        products = self.repository.get_by_category(category)
        return [ProductResponse.model_validate(p) for p in products]

    def create_product(self, product_data: ProductCreate) -> ProductResponse:
        """
        Create new product

        Raises:
            ConflictError: If the SKU already exists
        """
        try:
            with atomic(self.db):
                product = self.repository.create(product_data)
        except IntegrityError:
            raise ConflictError("Product SKU already exists")

        self.cache.invalidate()
        logger.info("Product created: %s (id=%s)", product.name, product.id)
        return ProductResponse.model_validate(product)

    def update_product(self, product_id: int, product_data: ProductUpdate) -> ProductResponse:
        """
        Update existing product, active or not

        Raises:
            NotFoundError: If the product does not exist
            ConflictError: If the new SKU already exists
        """
        product = self.repository.get_by_id(product_id)
        if not product:
            raise NotFoundError("Product not found")

        try:
            with atomic(self.db):
                self.repository.update(product, product_data)
        except IntegrityError:
            raise ConflictError("Product SKU already exists")

        self.cache.invalidate()
        return ProductResponse.model_validate(product)

    def delete_product(self, product_id: int) -> None:
        """Soft delete product"""
        product = self.repository.get_by_id(product_id)
        if not product:
            raise NotFoundError("Product not found")

        with atomic(self.db):
            self.repository.deactivate(product)

        self.cache.invalidate()
        logger.info("Product %s deactivated", product_id)
