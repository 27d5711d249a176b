"""
SQLAlchemy Order and OrderItem models
"""
from decimal import Decimal

from sqlalchemy import Column, Integer, String, Numeric, DateTime, Text, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from storefront.database import Base
from storefront.login_service.models.user import User
from storefront.product_service.models.product import Product

ORDER_STATUSES = ("pending", "confirmed", "processing", "shipped", "delivered", "cancelled")
TERMINAL_STATUSES = ("delivered", "cancelled")

# largest value of a Numeric(10, 2) amount column
MAX_AMOUNT = Decimal("99999999.99")


class Order(Base):
    """Order database model"""
    
    __tablename__ = "orders"
    
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    total_amount = Column(Numeric(10, 2), nullable=False)
    status = Column(String(50), nullable=False, default="pending", index=True)
    shipping_address = Column(Text, nullable=True)
    billing_address = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
    
    user = relationship(User)
    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="OrderItem.id"
    )
    
    # Constraints
    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'confirmed', 'processing', 'shipped', 'delivered', 'cancelled')",
            name="check_status_valid"
        ),
    )
    
    @property
    def username(self):
        return self.user.username if self.user else None
    
    @property
    def email(self):
        return self.user.email if self.user else None
    
    @property
    def first_name(self):
        return self.user.first_name if self.user else None
    
    @property
    def last_name(self):
        return self.user.last_name if self.user else None
    
    @property
    def item_count(self) -> int:
        return len(self.items)
    
    def __repr__(self):
        return f"<Order(id={self.id}, user_id={self.user_id}, total_amount={self.total_amount}, status='{self.status}')>"


class OrderItem(Base):
    """Order line; unit_price is the product price when the order was placed"""
    
    __tablename__ = "order_items"
    
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(10, 2), nullable=False)
    total_price = Column(Numeric(10, 2), nullable=False)
    
    order = relationship("Order", back_populates="items")
    product = relationship(Product)
    
    __table_args__ = (
        CheckConstraint("quantity > 0", name="check_quantity_positive"),
    )
    
    @property
    def product_name(self):
        return self.product.name if self.product else None
    
    @property
    def product_description(self):
        return self.product.description if self.product else None
    
    @property
    def image_url(self):
        return self.product.image_url if self.product else None
    
    def __repr__(self):
        return f"<OrderItem(id={self.id}, order_id={self.order_id}, product_id={self.product_id}, quantity={self.quantity})>"
