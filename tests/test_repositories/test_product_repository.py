"""
Unit tests for ProductRepository and OrderRepository aggregates
"""
from decimal import Decimal

from app.models import Order, Product
from app.models.order import OrderStatus
from app.repositories.order_repository import OrderRepository
from app.repositories.product_repository import ProductRepository
from app.repositories.user_repository import UserRepository


class TestProductRepository:
    """Test ProductRepository methods"""

    def test_find_by_id_returns_none_when_not_found(self, db_session):
        assert ProductRepository(db_session).find_by_id(999) is None

    def test_decrement_stock_only_when_enough(self, db_session, make_product):
        """Test the conditional update never drives stock below zero"""
        # Arrange
        product = make_product(stock=3)
        repo = ProductRepository(db_session)

        # Act
        taken = repo.decrement_stock(product.id, 2)
        refused = repo.decrement_stock(product.id, 2)
        db_session.commit()

        # Assert
        assert taken is True
        assert refused is False
        assert db_session.get(Product, product.id).stock == 1

    def test_find_all_total_ignores_pagination(self, db_session, make_product):
        for i in range(3):
            make_product(name=f"Product {i}")

        products, total = ProductRepository(db_session).find_all(limit=1)

        assert total == 3
        assert len(products) == 1

    def test_search_treats_wildcards_literally(self, db_session, make_product):
        make_product(name="Barra 100% cacao")
        make_product(name="Granola Berries")
        make_product(name="Mix_Frutos")

        repo = ProductRepository(db_session)
        percent, percent_total = repo.find_all(search="%")
        underscore, _ = repo.find_all(search="_")
        case_insensitive, _ = repo.find_all(search="GRANOLA")

        assert percent_total == 1
        assert [p.name for p in percent] == ["Barra 100% cacao"]
        assert [p.name for p in underscore] == ["Mix_Frutos"]
        assert [p.name for p in case_insensitive] == ["Granola Berries"]

    def test_find_low_stock_orders_by_stock(self, db_session, make_product):
        make_product(name="Plenty", stock=50)
        make_product(name="Few", stock=3)
        make_product(name="None left", stock=0)

        low = ProductRepository(db_session).find_low_stock(5)

        assert [p.name for p in low] == ["None left", "Few"]


class TestOrderRepository:

    def test_count_by_status_and_revenue(self, db_session, make_product):
        UserRepository(db_session).ensure_user("customer-1")
        product = make_product(price="10.00")
        repo = OrderRepository(db_session)
        item = {"product_id": product.id, "product_name": product.name, "quantity": 1, "price": Decimal("10.00")}

        repo.create("customer-1", Decimal("10.00"), [item])
        cancelled = repo.create("customer-1", Decimal("30.00"), [dict(item, quantity=3)])
        cancelled.status = OrderStatus.CANCELLED
        db_session.commit()

        counts = repo.count_by_status()
        assert counts["PENDING"] == 1
        assert counts["CANCELLED"] == 1
        assert counts["SHIPPED"] == 0
        assert repo.total_revenue() == Decimal("10.00")
        assert db_session.query(Order).count() == 2
