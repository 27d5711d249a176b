"""
Pydantic schemas for request/response validation
"""
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, Literal
from decimal import Decimal
from datetime import datetime

OrderStatus = Literal['pending', 'confirmed', 'processing', 'shipped', 'delivered', 'cancelled']


class OrderItemCreate(BaseModel):
    """One requested line of an order"""
    product_id: int = Field(..., gt=0, description="Product ID")
    quantity: int = Field(..., gt=0, description="Quantity to order")


class OrderCreate(BaseModel):
    """Schema for creating a new order"""
    user_id: int = Field(..., gt=0, description="Ordering user ID")
    items: list[OrderItemCreate] = Field(..., min_length=1, description="Requested lines, in order")
    shipping_address: Optional[str] = Field(None, description="Shipping address")
    billing_address: Optional[str] = Field(None, description="Billing address")


class OrderStatusUpdate(BaseModel):
    """Schema for updating order status"""
    status: OrderStatus = Field(..., description="Order status")


class OrderItemResponse(BaseModel):
    """Schema for order item response"""
    id: int
    order_id: int
    product_id: int
    quantity: int
    unit_price: Decimal
    total_price: Decimal
    product_name: Optional[str] = None
    product_description: Optional[str] = None
    image_url: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class OrderResponse(BaseModel):
    """Schema for order response without items"""
    id: int
    user_id: int
    total_amount: Decimal
    status: str
    shipping_address: Optional[str] = None
    billing_address: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class OrderSummaryResponse(OrderResponse):
    """Schema for order listings"""
    username: Optional[str] = None
    email: Optional[str] = None
    item_count: int


class OrderDetailResponse(OrderResponse):
    """Schema for a full order with its items"""
    username: Optional[str] = None
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    items: list[OrderItemResponse]


class OrderStatsResponse(BaseModel):
    """Schema for order statistics"""
    total_orders: int
    pending_orders: int
    confirmed_orders: int
    processing_orders: int
    shipped_orders: int
    delivered_orders: int
    cancelled_orders: int
    total_revenue: Decimal
    average_order_value: Decimal


class MessageResponse(BaseModel):
    message: str
