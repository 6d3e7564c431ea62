"""
Repository Layer - Data Access

This layer handles all database queries through the SQLAlchemy session.
Repositories abstract away query details from business logic.
"""
from app.repositories.user_repository import UserRepository
from app.repositories.product_repository import ProductRepository
from app.repositories.cart_repository import CartRepository
from app.repositories.order_repository import OrderRepository
from app.repositories.address_repository import AddressRepository

__all__ = [
    'UserRepository',
    'ProductRepository',
    'CartRepository',
    'OrderRepository',
    'AddressRepository',
]
