"""
Order Service - Business Logic Layer

Create and cancel run as single transactions and report their outcome as
``Ok(order)`` or ``Err(error)``; nothing they touched survives an ``Err``.
"""
import logging
from decimal import Decimal
from typing import List

from sqlalchemy.orm import Session

from storefront.database import atomic
from storefront.errors import (
    ConflictError,
    InsufficientStockError,
    NotFoundError,
    StorefrontError,
    ValidationError,
)
from storefront.login_service.repositories.user_repository import UserRepository
from storefront.order_service.models.order import MAX_AMOUNT, TERMINAL_STATUSES, Order
from storefront.order_service.repositories.order_repository import CENT, OrderRepository
from storefront.order_service.schemas.order import OrderCreate
from storefront.product_service.repositories.product_repository import ProductRepository
from storefront.result import Err, Ok, Result

logger = logging.getLogger(__name__)


class OrderService:
    """Service layer for order business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repository = OrderRepository(db)
        self.products = ProductRepository(db)
        self.users = UserRepository(db)

    def get_all_orders(self) -> List[Order]:
        return self.repository.get_all()

    def get_order(self, order_id: int) -> Order:
        order = self.repository.get_by_id(order_id)
        if not order:
            raise NotFoundError("Order not found")
        return order

    def get_orders_by_user(self, user_id: int) -> List[Order]:
        return self.repository.get_by_user(user_id)

    def get_stats(self) -> dict:
        return self.repository.stats()

    def create_order(self, order_data: OrderCreate) -> "Result[Order, StorefrontError]":
        """
        Place an order

        All product rows are locked first, in id order. Each line is then
        checked for availability and its stock decremented, in request order.
        The order total is the exact sum of line totals at the prices read
        under the lock, and must fit the amount columns.

        Returns:
            Ok with the created order, or Err with a ValidationError (no
            items, amount out of range), NotFoundError or InsufficientStockError
        """
        if not order_data.items:
            return Err(ValidationError("Order must contain at least one item"))

        try:
            with atomic(self.db):
                order = self._place(order_data)
        except StorefrontError as e:
            logger.info("Order for user %s rejected: %s", order_data.user_id, e.message)
            return Err(e)

        logger.info(
            "Order %s created for user %s: %d items, total %s",
            order.id, order.user_id, len(order_data.items), order.total_amount
        )
        return Ok(self.repository.get_by_id(order.id))

    def _place(self, order_data: OrderCreate) -> Order:
        if self.users.get_active_by_id(order_data.user_id) is None:
            raise NotFoundError(f"User with ID {order_data.user_id} not found or inactive")

        total = Decimal("0.00")
        items = []
        locked = self.products.lock_active(line.product_id for line in order_data.items)

        for line in order_data.items:
            product = locked.get(line.product_id)
            if product is None:
                raise NotFoundError(f"Product with ID {line.product_id} not found or inactive")

            if line.quantity > product.stock_quantity:
                raise InsufficientStockError(product.name, product.stock_quantity, line.quantity)

            unit_price = Decimal(product.price).quantize(CENT)
            line_total = (unit_price * line.quantity).quantize(CENT)
            total += line_total
            if total > MAX_AMOUNT:
                raise ValidationError(f"Order total exceeds the maximum amount of {MAX_AMOUNT}")

            if not self.products.decrement_stock(product, line.quantity):
                raise InsufficientStockError(product.name, product.stock_quantity, line.quantity)

            items.append({
                "product_id": product.id,
                "quantity": line.quantity,
                "unit_price": unit_price,
                "total_price": line_total,
            })

        return self.repository.create(
            {
                "user_id": order_data.user_id,
                "total_amount": total.quantize(CENT),
                "status": "pending",
                "shipping_address": order_data.shipping_address,
                "billing_address": order_data.billing_address,
            },
            items
        )

    def cancel_order(self, order_id: int) -> "Result[Order, StorefrontError]":
        """
        Cancel an order and put its items back in stock

        Returns:
            Ok with the cancelled order, or Err with a NotFoundError, or a
            ConflictError when the order is already delivered or cancelled
        """
        try:
            with atomic(self.db):
                order = self.repository.get_for_update(order_id)
                if order is None:
                    raise NotFoundError("Order not found")
                if order.status in TERMINAL_STATUSES:
                    raise ConflictError(f"Cannot cancel {order.status} order")

                for item in sorted(order.items, key=lambda i: i.product_id):
                    self.products.restore_stock(item.product_id, item.quantity)
                self.repository.set_status(order, "cancelled")
        except StorefrontError as e:
            logger.info("Cancellation of order %s rejected: %s", order_id, e.message)
            return Err(e)

        logger.info("Order %s cancelled, stock restored for %d items", order_id, len(order.items))
        return Ok(self.repository.get_by_id(order_id))

    def update_order_status(self, order_id: int, new_status: str) -> "Result[Order, StorefrontError]":
        """
        Move an order to a new status

        Setting ``cancelled`` goes through cancel_order so stock is restored.
        Delivered and cancelled orders accept no further updates.
        """
        if new_status == "cancelled":
            return self.cancel_order(order_id)

        try:
            with atomic(self.db):
                order = self.repository.get_for_update(order_id)
                if order is None:
                    raise NotFoundError("Order not found")
                if order.status in TERMINAL_STATUSES:
                    raise ConflictError(f"Cannot change status of {order.status} order")

                old_status = order.status
                self.repository.set_status(order, new_status)
        except StorefrontError as e:
            return Err(e)

        logger.info("Order %s status changed: %s -> %s", order_id, old_status, new_status)
        return Ok(self.repository.get_by_id(order_id))
