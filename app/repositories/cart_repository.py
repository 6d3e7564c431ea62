"""
Cart Repository - Data Access Layer for carts and cart items
"""
from typing import Optional

from sqlalchemy import select, delete, func
from sqlalchemy.orm import Session, selectinload

from app.models.cart import Cart, CartItem


class CartRepository:

    def __init__(self, db: Session):
        self.db = db

    def find_by_user(self, user_id: str) -> Optional[Cart]:
        """The user's cart with items and their products loaded"""
        return self.db.execute(
            select(Cart)
            .where(Cart.user_id == user_id)
            .options(selectinload(Cart.items).selectinload(CartItem.product))
        ).scalar_one_or_none()

    def get_or_create(self, user_id: str) -> Cart:
        cart = self.find_by_user(user_id)
        if cart is None:
            cart = Cart(user_id=user_id)
            self.db.add(cart)
            self.db.flush()
        return cart

    def find_item(self, item_id: int) -> Optional[CartItem]:
        return self.db.get(CartItem, item_id)

    def find_item_for_user(self, item_id: int, user_id: str) -> Optional[CartItem]:
        """Cart item only if it belongs to the user's cart"""
        return self.db.execute(
            select(CartItem)
            .join(Cart, Cart.id == CartItem.cart_id)
            .where(CartItem.id == item_id, Cart.user_id == user_id)
        ).scalar_one_or_none()

    def find_item_by_product(self, cart_id: int, product_id: int) -> Optional[CartItem]:
        return self.db.execute(
            select(CartItem).where(CartItem.cart_id == cart_id, CartItem.product_id == product_id)
        ).scalar_one_or_none()

    def add_or_increment(self, cart: Cart, product_id: int, quantity: int) -> CartItem:
        """
        Put a product in the cart, merging with an existing line

        An existing (cart, product) line gets its quantity incremented;
        otherwise a new line is created.
        """
        item = self.find_item_by_product(cart.id, product_id)
        if item is None:
            item = CartItem(cart_id=cart.id, product_id=product_id, quantity=quantity)
            self.db.add(item)
        else:
            item.quantity = CartItem.quantity + quantity
        self.db.flush()
        self.db.refresh(item)
        return item

    def delete_item(self, item: CartItem):
        self.db.delete(item)
        self.db.flush()

    def touch(self, cart_id: int):
        """Bump the cart's updated_at"""
        cart = self.db.get(Cart, cart_id)
        if cart is not None:
            cart.updated_at = func.now()
            self.db.flush()

    def clear(self, cart_id: int) -> int:
        """Delete every item of a cart; returns how many were removed"""
        result = self.db.execute(
            delete(CartItem).where(CartItem.cart_id == cart_id).execution_options(synchronize_session=False)
        )
        return result.rowcount
