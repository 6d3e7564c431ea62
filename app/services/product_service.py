"""
Product Service
Catalog management with ownership rules

Admins and super admins may change any product; sellers only the
products they created.
"""
import logging
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from app.core.auth import UserContext, is_admin
from app.core.exceptions import NotFoundError, PermissionDeniedError
from app.domain.product import Product, ProductPublic, ProductCreate, ProductUpdate
from app.repositories.product_repository import ProductRepository
from app.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


class ProductService:

    def __init__(self, db: Session):
        self.db = db
        self.products = ProductRepository(db)
        self.users = UserRepository(db)

    def list_public(self, search: Optional[str] = None, in_stock: Optional[bool] = None,
                    limit: int = 100, offset: int = 0) -> Tuple[List[ProductPublic], int]:
        products, total = self.products.find_all(search=search, in_stock=in_stock, limit=limit, offset=offset)
        return [ProductPublic.model_validate(product) for product in products], total

    def list_for_creator(self, user_id: str) -> List[Product]:
        return [Product.model_validate(product) for product in self.products.find_by_creator(user_id)]

    def get_product(self, product_id: int) -> Product:
        product = self.products.find_by_id(product_id)
        if product is None:
            raise NotFoundError("Product not found")
        return Product.model_validate(product)

    def create_product(self, user: UserContext, data: ProductCreate) -> Product:
        values = data.model_dump()
        values["image_url"] = values.get("image_url") or None

        self.users.ensure_user(user.user_id)
        product = self.products.create(created_by_id=user.user_id, **values)
        self.db.commit()

        logger.info(f"Product created: {product.id} by user {user.user_id}")
        return Product.model_validate(product)

    def _get_owned(self, user: UserContext, product_id: int, action: str):
        product = self.products.find_by_id(product_id)
        if product is None:
            raise NotFoundError("Product not found")

        if not is_admin(user) and product.created_by_id != user.user_id:
            raise PermissionDeniedError(f"You do not have permission to {action} this product")

        return product

    def update_product(self, user: UserContext, product_id: int, data: ProductUpdate) -> Product:
        """Apply only the fields sent; an empty image_url clears the image"""
        product = self._get_owned(user, product_id, "update")

        changes = data.model_dump(exclude_unset=True)
        if "image_url" in changes:
            changes["image_url"] = changes["image_url"] or None
        for field in ("name", "description", "price", "stock"):
            if field in changes and changes[field] is None:
                del changes[field]

        self.products.update(product, changes)
        self.db.commit()

        logger.info(f"Product updated: {product.id} by user {user.user_id}")
        return Product.model_validate(product)

    def delete_product(self, user: UserContext, product_id: int) -> bool:
        product = self._get_owned(user, product_id, "delete")

        self.products.delete(product)
        self.db.commit()

        logger.info(f"Product deleted: {product_id} by user {user.user_id}")
        return True
