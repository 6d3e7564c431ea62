"""
Order Service
Places orders (stock validation + single transaction) and serves order views

Steps of an order placement:
1. Combine duplicate product lines
2. Load products and validate existence and stock
3. Compute the total from current prices
4. In one transaction: create order + items, decrement stock
"""
import logging
from collections import OrderedDict
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.auth import UserContext, is_admin
from app.core.exceptions import (
    StoreError,
    NotFoundError,
    InvalidRequestError,
    InsufficientStockError,
    OrderTransactionError,
)
from app.domain.order import Order, OrderItemInput
from app.models.order import OrderStatus
from app.repositories.address_repository import AddressRepository
from app.repositories.cart_repository import CartRepository
from app.repositories.order_repository import OrderRepository
from app.repositories.product_repository import ProductRepository
from app.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


def combine_lines(items: Iterable[OrderItemInput]) -> "OrderedDict[int, int]":
    """product_id -> total quantity, keeping first-seen order"""
    quantities: "OrderedDict[int, int]" = OrderedDict()
    for item in items:
        quantities[item.product_id] = quantities.get(item.product_id, 0) + item.quantity
    return quantities


class OrderService:
    """
    Service for placing and querying orders
    """

    def __init__(self, db: Session):
        self.db = db
        self.orders = OrderRepository(db)
        self.products = ProductRepository(db)
        self.carts = CartRepository(db)
        self.addresses = AddressRepository(db)
        self.users = UserRepository(db)

    def _price_lines(self, quantities: Dict[int, int]) -> Tuple[Decimal, List[dict]]:
        """
        Validate products and stock, and build order item rows

        Raises:
            InvalidRequestError: a product does not exist
            InsufficientStockError: a product has less stock than requested
        """
        products = {product.id: product for product in self.products.find_by_ids(quantities.keys())}
        if len(products) != len(quantities):
            raise InvalidRequestError("One or more products not found")

        total_amount = Decimal("0")
        order_items = []
        for product_id, quantity in quantities.items():
            product = products[product_id]
            if product.stock < quantity:
                raise InsufficientStockError(product.name)

            total_amount += product.price * quantity
            order_items.append({
                "product_id": product_id,
                "product_name": product.name,
                "quantity": quantity,
                "price": product.price,  # Price at time of order
            })

        return total_amount, order_items

    def _check_address(self, user_id: str, address_id: Optional[int]):
        if address_id is not None and self.addresses.find_for_user(address_id, user_id) is None:
            raise NotFoundError("Address not found")

    def _place(self, user_id: str, quantities: Dict[int, int], shipping_address_id: Optional[int],
               clear_cart_id: Optional[int] = None) -> Order:
        self._check_address(user_id, shipping_address_id)
        total_amount, order_items = self._price_lines(quantities)

        try:
            self.users.ensure_user(user_id)
            order = self.orders.create(
                user_id=user_id,
                total_amount=total_amount,
                items=order_items,
                shipping_address_id=shipping_address_id,
            )

            for item in order_items:
                if not self.products.decrement_stock(item["product_id"], item["quantity"]):
                    # Stock changed since validation (concurrent order)
                    raise InsufficientStockError(item["product_name"])

            if clear_cart_id is not None:
                self.carts.clear(clear_cart_id)

            self.db.commit()

        except StoreError:
            self.db.rollback()
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Order creation transaction failed: {e}")
            raise OrderTransactionError() from e

        logger.info(f"Order created: {order.id} by user {user_id}")
        return Order.model_validate(self.orders.find_by_id(order.id))

    def create_order(self, user_id: str, items: List[OrderItemInput],
                     shipping_address_id: Optional[int] = None) -> Order:
        """
        Place an order for explicit product lines

        Args:
            user_id: Customer placing the order
            items: Requested lines (duplicates are combined)
            shipping_address_id: Optional address owned by the customer

        Returns:
            The created order with its items
        """
        return self._place(user_id, combine_lines(items), shipping_address_id)

    def checkout(self, user_id: str, shipping_address_id: Optional[int] = None) -> Order:
        """Place an order from the customer's cart and empty the cart in the same transaction"""
        cart = self.carts.find_by_user(user_id)
        lines = [item for item in cart.items if item.product is not None] if cart else []
        if not lines:
            raise InvalidRequestError("Cart is empty")

        quantities = OrderedDict((item.product_id, item.quantity) for item in lines)
        return self._place(user_id, quantities, shipping_address_id, clear_cart_id=cart.id)

    def list_for_user(self, user_id: str) -> List[Order]:
        return [Order.model_validate(order) for order in self.orders.find_by_user(user_id)]

    def list_all(self, status: Optional[OrderStatus] = None, user_id: Optional[str] = None,
                 limit: int = 50, offset: int = 0) -> Tuple[List[Order], int]:
        orders, total = self.orders.find_all(status=status, user_id=user_id, limit=limit, offset=offset)
        return [Order.model_validate(order) for order in orders], total

    def list_for_seller(self, seller_id: str) -> List[Order]:
        """Orders with the seller's products; each order keeps only that seller's items"""
        result = []
        for order in self.orders.find_by_seller(seller_id):
            seller_item_ids = {
                item.id for item in order.items
                if item.product is not None and item.product.created_by_id == seller_id
            }
            domain_order = Order.model_validate(order)
            result.append(domain_order.model_copy(update={
                "items": [item for item in domain_order.items if item.id in seller_item_ids]
            }))
        return result

    def get_order(self, user: UserContext, order_id: int) -> Order:
        """Order visible to its owner and to admins; 404 for anyone else"""
        order = self.orders.find_by_id(order_id)
        if order is None or (order.user_id != user.user_id and not is_admin(user)):
            raise NotFoundError("Order not found")
        return Order.model_validate(order)

    def update_status(self, order_id: int, status: OrderStatus, changed_by: str) -> Order:
        order = self.orders.find_by_id(order_id)
        if order is None:
            raise NotFoundError("Order not found")

        previous = order.status
        order.status = status
        self.db.commit()

        logger.info(f"Order {order_id} status {previous.value} -> {status.value} by user {changed_by}")
        return Order.model_validate(self.orders.find_by_id(order_id))
