"""
Cart Service
Shopping cart operations for the signed-in user

Adding a product already in the cart merges into the existing line
(quantity is incremented) instead of creating a second line.
"""
import logging
from typing import List

from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError, PermissionDeniedError
from app.domain.cart import Cart, CartItem, CartItemAdd
from app.repositories.cart_repository import CartRepository
from app.repositories.product_repository import ProductRepository
from app.repositories.user_repository import UserRepository
from app.services.order_service import combine_lines

logger = logging.getLogger(__name__)


class CartService:

    def __init__(self, db: Session):
        self.db = db
        self.carts = CartRepository(db)
        self.products = ProductRepository(db)
        self.users = UserRepository(db)

    def _load_cart(self, user_id: str) -> Cart:
        # Expire first so items added/removed in this session are re-read
        self.db.expire_all()
        return Cart.from_orm_cart(self.carts.find_by_user(user_id))

    def get_cart(self, user_id: str) -> Cart:
        """The user's cart with totals, created on first access"""
        cart = self.carts.find_by_user(user_id)
        if cart is None:
            self.users.ensure_user(user_id)
            self.carts.get_or_create(user_id)
            self.db.commit()
            logger.info(f"Cart created for user {user_id}")
            return self._load_cart(user_id)
        return Cart.from_orm_cart(cart)

    def add_item(self, user_id: str, product_id: int, quantity: int) -> CartItem:
        """
        Add a product to the cart or increase its quantity

        Raises:
            NotFoundError: the product does not exist
        """
        self.users.ensure_user(user_id)
        cart = self.carts.get_or_create(user_id)

        if self.products.find_by_id(product_id) is None:
            self.db.rollback()
            raise NotFoundError("Product not found.")

        item = self.carts.add_or_increment(cart, product_id, quantity)
        self.db.commit()

        self.db.refresh(item)
        return CartItem.model_validate(item)

    def update_item_quantity(self, user_id: str, item_id: int, quantity: int) -> CartItem:
        item = self.carts.find_item_for_user(item_id, user_id)
        if item is None:
            raise NotFoundError("Cart item not found or does not belong to the user.")

        item.quantity = quantity
        self.db.commit()

        self.db.refresh(item)
        return CartItem.model_validate(item)

    def remove_item(self, user_id: str, item_id: int) -> CartItem:
        """
        Remove a line from the cart

        Raises:
            NotFoundError: no such cart item
            PermissionDeniedError: the item belongs to another user's cart
        """
        item = self.carts.find_item(item_id)
        if item is None:
            raise NotFoundError("Cart item not found")
        if item.cart.user_id != user_id:
            raise PermissionDeniedError("You do not have permission to remove this item")

        removed = CartItem.model_validate(item)
        cart_id = item.cart_id

        self.carts.delete_item(item)
        self.carts.touch(cart_id)
        self.db.commit()

        return removed

    def clear_cart(self, user_id: str) -> bool:
        cart = self.carts.find_by_user(user_id)
        if cart is not None:
            removed = self.carts.clear(cart.id)
            self.db.commit()
            logger.info(f"Cart cleared for user {user_id} ({removed} items)")
        return True

    def merge_items(self, user_id: str, items: List[CartItemAdd]) -> dict:
        """
        Fold a guest cart into the user's cart in one transaction

        Duplicate lines are summed; products that no longer exist are
        skipped and reported.

        Returns:
            {"cart": Cart, "skipped_product_ids": [...]}
        """
        quantities = combine_lines(items)
        existing = {product.id for product in self.products.find_by_ids(quantities.keys())}

        self.users.ensure_user(user_id)
        cart = self.carts.get_or_create(user_id)
        skipped = []
        for product_id, quantity in quantities.items():
            if product_id not in existing:
                skipped.append(product_id)
                continue
            self.carts.add_or_increment(cart, product_id, quantity)

        self.db.commit()

        if skipped:
            logger.warning(f"Skipped unknown products while merging cart for {user_id}: {skipped}")

        return {"cart": self._load_cart(user_id), "skipped_product_ids": skipped}
