"""
Cart Domain Models
"""
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from decimal import Decimal

from app.domain.common import DomainModel, Money
from app.domain.product import Product


class CartItem(DomainModel):
    id: int
    cart_id: int
    product_id: int
    quantity: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    product: Optional[Product] = None

    @property
    def line_total(self) -> Decimal:
        if self.product is None:
            return Decimal("0")
        return self.product.price * self.quantity


class Cart(DomainModel):
    """
    A user's cart with its computed totals

    total: sum of price * quantity over items whose product still exists
    item_count: sum of quantities over those items
    """
    id: int
    user_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    items: List[CartItem] = []
    total: Money = Decimal("0")
    item_count: int = 0

    @classmethod
    def from_orm_cart(cls, cart) -> "Cart":
        items = [CartItem.model_validate(item) for item in cart.items]
        valid_items = [item for item in items if item.product is not None]
        return cls(
            id=cart.id,
            user_id=cart.user_id,
            created_at=cart.created_at,
            updated_at=cart.updated_at,
            items=valid_items,
            total=sum((item.line_total for item in valid_items), Decimal("0")),
            item_count=sum(item.quantity for item in valid_items),
        )


class CartItemAdd(BaseModel):
    product_id: int
    quantity: int = Field(1, ge=1, description="Quantity must be at least 1")


class CartItemUpdate(BaseModel):
    quantity: int = Field(..., ge=1, description="Quantity must be at least 1")


class CartMergeRequest(BaseModel):
    """Items of a guest (signed out) cart to fold into the user's cart"""
    items: List[CartItemAdd] = Field(default_factory=list)
