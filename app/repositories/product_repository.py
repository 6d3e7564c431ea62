"""
Product Repository - Data Access Layer for Products

Handles all database queries for products.
"""
from typing import List, Optional, Tuple, Iterable

from sqlalchemy import select, func, update
from sqlalchemy.orm import Session

from app.models.product import Product


class ProductRepository:
    """
    Repository for Product data access

    All queries for products are centralized here.
    """

    def __init__(self, db: Session):
        self.db = db

    def find_by_id(self, product_id: int) -> Optional[Product]:
        """
        Find product by ID

        Args:
            product_id: Internal product ID

        Returns:
            Product or None if not found
        """
        return self.db.get(Product, product_id)

    def find_by_ids(self, product_ids: Iterable[int]) -> List[Product]:
        ids = list(set(product_ids))
        if not ids:
            return []
        return list(self.db.execute(select(Product).where(Product.id.in_(ids))).scalars().all())

    def find_all(
        self,
        search: Optional[str] = None,
        in_stock: Optional[bool] = None,
        limit: int = 100,
        offset: int = 0
    ) -> Tuple[List[Product], int]:
        """
        Find products with filters, newest first

        Args:
            search: Case-insensitive search in name
            in_stock: True for stock > 0, False for sold out
            limit: Maximum results to return
            offset: Number of results to skip

        Returns:
            Tuple of (list of products, total count)
        """
        conditions = []

        if search:
            escaped = search.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
            conditions.append(Product.name.ilike(f"%{escaped}%", escape="\\"))

        if in_stock is True:
            conditions.append(Product.stock > 0)
        elif in_stock is False:
            conditions.append(Product.stock <= 0)

        total = self.db.execute(
            select(func.count(Product.id)).where(*conditions)
        ).scalar_one()

        products = self.db.execute(
            select(Product)
            .where(*conditions)
            .order_by(Product.created_at.desc(), Product.id.desc())
            .limit(limit)
            .offset(offset)
        ).scalars().all()

        return list(products), total

    def find_by_creator(self, user_id: str) -> List[Product]:
        """Products created by a seller/admin, newest first"""
        return list(
            self.db.execute(
                select(Product)
                .where(Product.created_by_id == user_id)
                .order_by(Product.created_at.desc(), Product.id.desc())
            ).scalars().all()
        )

    def find_low_stock(self, threshold: int) -> List[Product]:
        """Products with stock at or below the threshold, lowest stock first"""
        return list(
            self.db.execute(
                select(Product)
                .where(Product.stock <= threshold)
                .order_by(Product.stock.asc(), Product.id)
            ).scalars().all()
        )

    def create(self, **data) -> Product:
        product = Product(**data)
        self.db.add(product)
        self.db.flush()
        return product

    def update(self, product: Product, data: dict) -> Product:
        for field, value in data.items():
            setattr(product, field, value)
        self.db.flush()
        return product

    def delete(self, product: Product):
        self.db.delete(product)
        self.db.flush()

    def decrement_stock(self, product_id: int, quantity: int) -> bool:
        """
        Atomically take `quantity` units from a product's stock

        The UPDATE only matches while enough stock remains, so concurrent
        orders can never drive stock below zero. Loaded Product objects are
        not refreshed until the session expires them (commit).

        Returns:
            True if the stock was decremented, False if it was insufficient
        """
        result = self.db.execute(
            update(Product)
            .where(Product.id == product_id, Product.stock >= quantity)
            .values(stock=Product.stock - quantity)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def count(self) -> int:
        return self.db.execute(select(func.count(Product.id))).scalar_one()
