"""
Modelos de base de datos
"""
from .user import User, Role, UserRole
from .product import Product
from .cart import Cart, CartItem
from .order import Order, OrderItem, OrderStatus
from .address import Address

__all__ = [
    "User",
    "Role",
    "UserRole",
    "Product",
    "Cart",
    "CartItem",
    "Order",
    "OrderItem",
    "OrderStatus",
    "Address",
]
