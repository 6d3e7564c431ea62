"""
Domain Layer - Business Entities

This layer contains Pydantic models representing business entities and the
request bodies the API accepts. These models enforce type safety and
validation across the application.
"""
from app.domain.common import DomainModel, Money
from app.domain.product import Product, ProductPublic, ProductCreate, ProductUpdate
from app.domain.cart import Cart, CartItem, CartItemAdd, CartItemUpdate, CartMergeRequest
from app.domain.order import (
    Order,
    OrderItem,
    OrderItemInput,
    OrderCreate,
    CheckoutRequest,
    OrderStatusUpdate,
)
from app.domain.user import UserProfile, UserWithRoles, RoleAssignment
from app.domain.address import Address, AddressCreate, AddressUpdate

__all__ = [
    'DomainModel', 'Money',
    'Product', 'ProductPublic', 'ProductCreate', 'ProductUpdate',
    'Cart', 'CartItem', 'CartItemAdd', 'CartItemUpdate', 'CartMergeRequest',
    'Order', 'OrderItem', 'OrderItemInput', 'OrderCreate', 'CheckoutRequest', 'OrderStatusUpdate',
    'UserProfile', 'UserWithRoles', 'RoleAssignment',
    'Address', 'AddressCreate', 'AddressUpdate',
]
