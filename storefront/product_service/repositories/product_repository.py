"""
Product Repository - Data Access Layer
"""
from typing import Dict, Iterable, List, Optional

from sqlalchemy import desc, select, update
from sqlalchemy.orm import Session
from sqlalchemy.sql import func

from storefront.product_service.models.product import Product
from storefront.product_service.schemas.product import ProductCreate, ProductUpdate


class ProductRepository:
    """Repository for Product CRUD and stock operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_all_active(self) -> List[Product]:
        """Get all active products, newest first"""
        return self.db.scalars(
            select(Product)
            .where(Product.is_active.is_(True))
            .order_by(desc(Product.created_at), desc(Product.id))
        ).all()

    def get_by_id(self, product_id: int) -> Optional[Product]:
        """Get product by ID regardless of its active flag"""
        return self.db.get(Product, product_id)

    def get_active_by_id(self, product_id: int) -> Optional[Product]:
        """Get active product by ID"""
        return self.db.scalars(
            select(Product).where(Product.id == product_id, Product.is_active.is_(True))
        ).first()

    def lock_active(self, product_ids: Iterable[int]) -> Dict[int, Product]:
        """
        Lock the active products among product_ids, in ascending id order

        Every order takes its locks in the same order, so two orders over
        the same products cannot deadlock.
        """
        products = self.db.scalars(
            select(Product)
            .where(Product.id.in_(sorted(set(product_ids))), Product.is_active.is_(True))
            .order_by(Product.id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).all()
        return {product.id: product for product in products}

    def get_by_category(self, category: str) -> List[Product]:
        """Get active products in a category, newest first"""
        return self.db.scalars(
            select(Product)
            .where(Product.category == category, Product.is_active.is_(True))
            .order_by(desc(Product.created_at), desc(Product.id))
        ).all()

    def create(self, product_data: ProductCreate) -> Product:
        """Create new product (flushed, not committed)"""
        product = Product(**product_data.model_dump())
        self.db.add(product)
        self.db.flush()
        return product

    def update(self, product: Product, product_data: ProductUpdate) -> Product:
        """Apply provided fields to a product"""
        update_data = product_data.model_dump(exclude_unset=True, exclude_none=True)
        for field, value in update_data.items():
            setattr(product, field, value)
        self.db.flush()
        return product

    def deactivate(self, product: Product) -> Product:
        """Soft delete"""
        product.is_active = False
        self.db.flush()
        return product

    def decrement_stock(self, product: Product, quantity: int) -> bool:
        """
        Subtract quantity from stock unless that would make it negative

        Issued as a relative, guarded UPDATE so it never overdraws even
        without the row lock. Returns False when nothing was updated.
        """
        result = self.db.execute(
            update(Product)
            .where(Product.id == product.id, Product.stock_quantity >= quantity)
            .values(stock_quantity=Product.stock_quantity - quantity, updated_at=func.now())
            .execution_options(synchronize_session=False)
        )
        self.db.expire(product, ["stock_quantity", "updated_at"])
        return result.rowcount == 1

    def restore_stock(self, product_id: int, quantity: int) -> bool:
        """Add quantity back to stock"""
        result = self.db.execute(
            update(Product)
            .where(Product.id == product_id)
            .values(stock_quantity=Product.stock_quantity + quantity, updated_at=func.now())
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1
