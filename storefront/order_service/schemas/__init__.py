"""
Schemas package
"""
from storefront.order_service.schemas.order import (
    OrderStatus,
    OrderItemCreate,
    OrderCreate,
    OrderStatusUpdate,
    OrderItemResponse,
    OrderResponse,
    OrderSummaryResponse,
    OrderDetailResponse,
    OrderStatsResponse,
    MessageResponse
)

__all__ = [
    "OrderStatus",
    "OrderItemCreate",
    "OrderCreate",
    "OrderStatusUpdate",
    "OrderItemResponse",
    "OrderResponse",
    "OrderSummaryResponse",
    "OrderDetailResponse",
    "OrderStatsResponse",
    "MessageResponse"
]
