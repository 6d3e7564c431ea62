"""
Pytest fixtures and configuration for Storefront backend tests

Every test gets its own in-memory SQLite database with the roles seeded,
and a fake Firebase client that maps test tokens to user ids.
"""
import pytest
from decimal import Decimal

from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.database import build_engine, get_db, init_db
from app.core.firebase import FirebaseAuthClient, FirebaseUser, get_auth_client
from app.core.roles import RoleName
from app.main import app
from app.models import Product
from app.repositories.user_repository import UserRepository


class FakeAuthClient(FirebaseAuthClient):
    """Firebase client double: token -> uid, uid -> profile"""

    def __init__(self):
        super().__init__(None)
        self.tokens = {}
        self.profiles = {}

    @property
    def is_initialized(self) -> bool:
        return True

    def register(self, uid, email=None, display_name=None):
        token = f"token-{uid}"
        self.tokens[token] = uid
        self.profiles[uid] = FirebaseUser(uid=uid, email=email, display_name=display_name)
        return token

    def verify_token(self, token):
        uid = self.tokens.get(token)
        return {"uid": uid} if uid else None

    def get_user(self, uid):
        return self.profiles.get(uid)


@pytest.fixture(scope="function")
def engine():
    """
    Fresh in-memory database per test

    StaticPool keeps a single connection so every session sees the same data
    """
    test_engine = build_engine("sqlite://", poolclass=StaticPool)
    init_db(bind=test_engine)
    yield test_engine
    test_engine.dispose()


@pytest.fixture(scope="function")
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session(session_factory):
    """Session for arranging and asserting, with the roles seeded"""
    session = session_factory()
    UserRepository(session).ensure_roles()
    session.commit()
    yield session
    session.close()


@pytest.fixture
def auth_client():
    return FakeAuthClient()


@pytest.fixture
def client(session_factory, db_session, auth_client):
    """
    TestClient wired to the test database and the fake Firebase client

    Each request gets its own session, like in production
    """
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_auth_client] = lambda: auth_client

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session, auth_client):
    """
    Factory creating a user with roles

    Returns the auth headers for that user
    """
    def _make_user(uid, *roles, email=None, name=None):
        repo = UserRepository(db_session)
        repo.ensure_user(uid, email=email or f"{uid}@example.com", name=name)
        for role_name in roles:
            role = repo.find_role(role_name)
            repo.upsert_user_role(uid, role.id)
        db_session.commit()

        token = auth_client.register(uid, email=email or f"{uid}@example.com", display_name=name)
        return {"x-firebase-token": token}

    return _make_user


@pytest.fixture
def customer_headers(make_user):
    return make_user("customer-1", RoleName.CUSTOMER)


@pytest.fixture
def seller_headers(make_user):
    return make_user("seller-1", RoleName.SELLER)


@pytest.fixture
def admin_headers(make_user):
    return make_user("admin-1", RoleName.ADMIN)


@pytest.fixture
def super_admin_headers(make_user):
    return make_user("root-1", RoleName.SUPER_ADMIN)


@pytest.fixture
def make_product(db_session):
    """Factory inserting a product directly in the database"""
    def _make_product(name="Barra Keto Cacao", price="10.00", stock=10, created_by_id=None, **extra):
        product = Product(
            name=name,
            description=extra.pop("description", "A delicious keto snack bar"),
            price=Decimal(price),
            stock=stock,
            created_by_id=created_by_id,
            **extra,
        )
        db_session.add(product)
        db_session.commit()
        return product

    return _make_product


@pytest.fixture
def sample_product_data():
    """
    Provides sample product data for tests
    """
    return {
        "name": "Barra Keto Cacao",
        "description": "Keto bar with cacao, 35g",
        "price": 19.99,
        "image_url": "https://example.com/barra.png",
        "stock": 25
    }
