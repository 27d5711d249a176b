"""
Order Repository - Data Access Layer
"""
from decimal import Decimal
from typing import Iterable, List, Optional

from sqlalchemy import case, desc, select
from sqlalchemy.orm import Session, joinedload, selectinload
from sqlalchemy.sql import func

from storefront.order_service.models.order import ORDER_STATUSES, Order, OrderItem

CENT = Decimal("0.01")


class OrderRepository:
    """Repository for Order and OrderItem persistence"""

    def __init__(self, db: Session):
        self.db = db

    def get_all(self) -> List[Order]:
        """Get all orders with their user and items, newest first"""
        return self.db.scalars(
            select(Order)
            .options(joinedload(Order.user), selectinload(Order.items))
            .order_by(desc(Order.created_at), desc(Order.id))
        ).unique().all()

    def get_by_id(self, order_id: int) -> Optional[Order]:
        """Get order by ID with user, items and item products loaded"""
        return self.db.scalars(
            select(Order)
            .where(Order.id == order_id)
            .options(
                joinedload(Order.user),
                selectinload(Order.items).joinedload(OrderItem.product)
            )
            .execution_options(populate_existing=True)
        ).unique().first()

    def get_for_update(self, order_id: int) -> Optional[Order]:
        """Get order by ID and lock its row until the transaction ends"""
        return self.db.scalars(
            select(Order)
            .where(Order.id == order_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).first()

    def get_by_user(self, user_id: int) -> List[Order]:
        """Get a user's orders, newest first"""
        return self.db.scalars(
            select(Order)
            .where(Order.user_id == user_id)
            .options(joinedload(Order.user), selectinload(Order.items))
            .order_by(desc(Order.created_at), desc(Order.id))
        ).unique().all()

    def create(self, order_data: dict, items: Iterable[dict]) -> Order:
        """
        Insert an order and its items (flushed, not committed)

        Args:
            order_data: Order column values
            items: Column values of each item, in line order
        """
        order = Order(**order_data)
        order.items = [OrderItem(**item) for item in items]
        self.db.add(order)
        self.db.flush()
        return order

    def set_status(self, order: Order, new_status: str) -> Order:
        order.status = new_status
        self.db.flush()
        return order

    def stats(self) -> dict:
        """Counts per status plus revenue figures over every order"""
        columns = [func.count(Order.id).label("total_orders")]
        columns += [
            func.count(case((Order.status == status, 1))).label(f"{status}_orders")
            for status in ORDER_STATUSES
        ]
        columns += [
            func.coalesce(func.sum(Order.total_amount), 0).label("total_revenue"),
            func.coalesce(func.avg(Order.total_amount), 0).label("average_order_value"),
        ]

        row = self.db.execute(select(*columns)).one()
        stats = dict(row._mapping)
        stats["total_revenue"] = Decimal(str(stats["total_revenue"])).quantize(CENT)
        stats["average_order_value"] = Decimal(str(stats["average_order_value"])).quantize(CENT)
        return stats
