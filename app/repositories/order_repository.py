"""
Order Repository - Data Access Layer for Orders

Handles all database queries for orders and order items.
"""
from typing import Dict, List, Optional, Tuple
from decimal import Decimal

from sqlalchemy import select, func
from sqlalchemy.orm import Session, selectinload

from app.models.order import Order, OrderItem, OrderStatus
from app.models.product import Product


class OrderRepository:
    """
    Repository for Order data access
    """

    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def _with_details(query):
        return query.options(
            selectinload(Order.items).selectinload(OrderItem.product),
            selectinload(Order.user),
        )

    def find_by_id(self, order_id: int) -> Optional[Order]:
        return self.db.execute(
            self._with_details(select(Order).where(Order.id == order_id))
        ).scalar_one_or_none()

    def find_by_user(self, user_id: str) -> List[Order]:
        """A customer's orders, newest first"""
        return list(
            self.db.execute(
                self._with_details(
                    select(Order)
                    .where(Order.user_id == user_id)
                    .order_by(Order.created_at.desc(), Order.id.desc())
                )
            ).scalars().all()
        )

    def find_all(
        self,
        status: Optional[OrderStatus] = None,
        user_id: Optional[str] = None,
        limit: int = 50,
        offset: int = 0
    ) -> Tuple[List[Order], int]:
        """
        Find orders with filters, newest first

        Returns:
            Tuple of (list of orders, total count)
        """
        conditions = []
        if status is not None:
            conditions.append(Order.status == status)
        if user_id:
            conditions.append(Order.user_id == user_id)

        total = self.db.execute(select(func.count(Order.id)).where(*conditions)).scalar_one()

        orders = self.db.execute(
            self._with_details(
                select(Order)
                .where(*conditions)
                .order_by(Order.created_at.desc(), Order.id.desc())
                .limit(limit)
                .offset(offset)
            )
        ).scalars().all()

        return list(orders), total

    def find_by_seller(self, seller_id: str) -> List[Order]:
        """Orders containing at least one product created by the seller, newest first"""
        seller_order_ids = (
            select(OrderItem.order_id)
            .join(Product, Product.id == OrderItem.product_id)
            .where(Product.created_by_id == seller_id)
        )
        return list(
            self.db.execute(
                self._with_details(
                    select(Order)
                    .where(Order.id.in_(seller_order_ids))
                    .order_by(Order.created_at.desc(), Order.id.desc())
                )
            ).scalars().all()
        )

    def create(self, user_id: str, total_amount: Decimal, items: List[dict],
               shipping_address_id: Optional[int] = None) -> Order:
        """
        Add an order and its items to the session (caller commits)

        Args:
            items: dicts with product_id, product_name, quantity, price
        """
        order = Order(
            user_id=user_id,
            total_amount=total_amount,
            status=OrderStatus.PENDING,
            shipping_address_id=shipping_address_id,
            items=[OrderItem(**item) for item in items],
        )
        self.db.add(order)
        self.db.flush()
        return order

    def count(self) -> int:
        return self.db.execute(select(func.count(Order.id))).scalar_one()

    def count_by_status(self) -> Dict[str, int]:
        rows = self.db.execute(
            select(Order.status, func.count(Order.id)).group_by(Order.status)
        ).all()
        counts = {status.value: 0 for status in OrderStatus}
        for status, total in rows:
            counts[OrderStatus(status).value] = total
        return counts

    def total_revenue(self) -> Decimal:
        """Sum of order totals, excluding cancelled orders"""
        revenue = self.db.execute(
            select(func.coalesce(func.sum(Order.total_amount), 0))
            .where(Order.status != OrderStatus.CANCELLED)
        ).scalar_one()
        return Decimal(str(revenue))
