"""
Order Domain Models

Represents order-related entities in the storefront.
"""
from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from decimal import Decimal

from app.domain.common import DomainModel, Money
from app.models.order import OrderStatus


class ProductSummary(DomainModel):
    """Lightweight product reference embedded in order items"""
    id: int
    name: str
    image_url: Optional[str] = None


class UserSummary(DomainModel):
    """Lightweight user reference embedded in admin/seller order views"""
    id: str
    email: Optional[str] = None
    name: Optional[str] = None


class OrderItem(DomainModel):
    """
    Order Item domain model - represents a line item in an order

    Fields:
        id: Internal order item ID
        order_id: Parent order ID
        product_id: Reference to product catalog (None once the product is deleted)
        product_name: Product name at time of order
        quantity: Number of units ordered
        price: Unit price at time of order
        product: Current catalog entry, if it still exists
    """
    id: int
    order_id: int
    product_id: Optional[int] = None
    product_name: str
    quantity: int = Field(..., ge=1)
    price: Money
    product: Optional[ProductSummary] = None

    @property
    def subtotal(self) -> Decimal:
        return self.price * self.quantity


class Order(DomainModel):
    """
    Order domain model - represents a customer order

    Fields:
        id: Internal order ID (primary key)
        user_id: Customer that placed the order
        total_amount: Sum of price * quantity of the items
        status: PENDING, PROCESSING, SHIPPED, DELIVERED or CANCELLED
        shipping_address_id: Delivery address (optional)
        items: Order line items
        user: Customer summary (admin and seller views)
    """
    id: int
    user_id: str
    total_amount: Money
    status: OrderStatus
    shipping_address_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    items: List[OrderItem] = []
    user: Optional[UserSummary] = None

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def is_cancelled(self) -> bool:
        return self.status == OrderStatus.CANCELLED


class OrderItemInput(BaseModel):
    product_id: int = Field(..., gt=0)
    quantity: int = Field(..., gt=0, description="Quantity must be positive")


class OrderCreate(BaseModel):
    items: List[OrderItemInput] = Field(..., min_length=1, description="Order must contain at least one item")
    shipping_address_id: Optional[int] = None


class CheckoutRequest(BaseModel):
    shipping_address_id: Optional[int] = None


class OrderStatusUpdate(BaseModel):
    status: OrderStatus
