"""
Order API endpoints
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from storefront.database import get_db
from storefront.order_service.services.order_service import OrderService
from storefront.order_service.schemas.order import (
    OrderCreate,
    OrderStatusUpdate,
    OrderSummaryResponse,
    OrderDetailResponse,
    OrderStatsResponse,
    MessageResponse
)
from storefront.result import unwrap

router = APIRouter(prefix="/api/orders", tags=["orders"])
user_orders_router = APIRouter(prefix="/api/users", tags=["orders"])


def get_order_service(db: Session = Depends(get_db)) -> OrderService:
    """Dependency to get OrderService instance"""
    return OrderService(db)


@router.get("", response_model=List[OrderSummaryResponse], summary="Get all orders")
def get_orders(service: OrderService = Depends(get_order_service)):
    """Retrieve all orders with the ordering user and item count, newest first"""
    return service.get_all_orders()


@router.get("/stats", response_model=OrderStatsResponse, summary="Get order statistics")
def get_order_stats(service: OrderService = Depends(get_order_service)):
    """Order counts per status, total revenue and average order value"""
    return service.get_stats()


@router.get("/{order_id}", response_model=OrderDetailResponse, summary="Get order by ID")
def get_order(
    order_id: int,
    service: OrderService = Depends(get_order_service)
):
    """
    Retrieve one order with user details and items

    - **order_id**: Order ID
    """
    return service.get_order(order_id)


@router.post(
    "",
    response_model=OrderDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create order"
)
def create_order(
    order_data: OrderCreate,
    service: OrderService = Depends(get_order_service)
):
    """
    Create a new order

    - **user_id**: Ordering user (required)
    - **items**: List of `{product_id, quantity}` (required, non-empty)
    - **shipping_address** / **billing_address**: Optional

    Stock is reserved and the total computed from current prices in one
    transaction. Any unknown product or short stock fails the whole order.
    """
    return unwrap(service.create_order(order_data))


@router.patch("/{order_id}/status", response_model=OrderDetailResponse, summary="Update order status")
def update_order_status(
    order_id: int,
    status_data: OrderStatusUpdate,
    service: OrderService = Depends(get_order_service)
):
    """
    Update order status

    Valid statuses: pending, confirmed, processing, shipped, delivered, cancelled.
    Delivered and cancelled orders cannot change status.
    """
    return unwrap(service.update_order_status(order_id, status_data.status))


@router.delete("/{order_id}", response_model=MessageResponse, summary="Cancel order")
def cancel_order(
    order_id: int,
    service: OrderService = Depends(get_order_service)
):
    """Cancel an order that is not yet delivered and restore its stock"""
    unwrap(service.cancel_order(order_id))
    return MessageResponse(message="Order cancelled successfully")


@user_orders_router.get(
    "/{user_id}/orders",
    response_model=List[OrderSummaryResponse],
    summary="Get orders of a user"
)
def get_user_orders(
    user_id: int,
    service: OrderService = Depends(get_order_service)
):
    return service.get_orders_by_user(user_id)
