"""
Pytest fixtures for the storefront services.

Every service runs against one throwaway SQLite file; tables are emptied
between tests and the Redis listing cache is replaced by an in-memory client.
"""
import os
import tempfile
from decimal import Decimal

# Settings are read at import time, so the environment must be ready first
_tmpdir = tempfile.mkdtemp(prefix="storefront-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_tmpdir, 'storefront-test.db')}"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["REDIS_URL"] = ""
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import redis
from fastapi.testclient import TestClient

from storefront.database import Base, SessionLocal, engine, init_db
from storefront.login_service.main import app as login_app
from storefront.login_service.models.user import User
from storefront.order_service.main import app as order_app
from storefront.product_service.cache import ProductListingCache, get_product_cache
from storefront.product_service.main import app as product_app
from storefront.product_service.models.product import Product


class MemoryRedis:
    """Just enough of redis.Redis for the listing cache"""

    def __init__(self):
        self.store = {}
        self.expiries = {}

    def get(self, key):
        return self.store.get(key)

    def set(self, key, value, ex=None):
        self.store[key] = value
        self.expiries[key] = ex
        return True

    def delete(self, *keys):
        removed = 0
        for key in keys:
            if self.store.pop(key, None) is not None:
                removed += 1
            self.expiries.pop(key, None)
        return removed

    def incr(self, key):
        value = int(self.store.get(key, 0)) + 1
        self.store[key] = str(value)
        return value

    def ping(self):
        return True


class BrokenRedis:
    """Client whose every command fails like an unreachable server"""

    def get(self, key):
        raise redis.ConnectionError("Connection refused")

    def set(self, key, value, ex=None):
        raise redis.ConnectionError("Connection refused")

    def delete(self, *keys):
        raise redis.ConnectionError("Connection refused")

    def incr(self, key):
        raise redis.ConnectionError("Connection refused")

    def ping(self):
        raise redis.ConnectionError("Connection refused")


@pytest.fixture(scope="session", autouse=True)
def database():
    """Create the schema once for the whole run"""
    init_db()
    yield
    engine.dispose()


@pytest.fixture(autouse=True)
def clean_tables(database):
    """Empty every table after each test"""
    yield
    with SessionLocal() as session:
        for table in reversed(Base.metadata.sorted_tables):
            session.execute(table.delete())
        session.commit()


@pytest.fixture
def db_session():
    with SessionLocal() as session:
        yield session


@pytest.fixture(scope="session")
def login_client():
    with TestClient(login_app) as client:
        yield client


@pytest.fixture(scope="session")
def order_client():
    with TestClient(order_app) as client:
        yield client


@pytest.fixture
def memory_redis():
    return MemoryRedis()


@pytest.fixture
def product_client(memory_redis):
    """Product service client with the listing cache backed by memory_redis"""
    product_app.dependency_overrides[get_product_cache] = lambda: ProductListingCache(memory_redis)
    with TestClient(product_app) as client:
        yield client
    product_app.dependency_overrides.clear()


@pytest.fixture
def make_product():
    """Insert a product row and return its id"""

    def _make_product(name="Widget", price="10.00", stock_quantity=10, **fields):
        with SessionLocal() as session:
            product = Product(
                name=name,
                price=Decimal(price),
                stock_quantity=stock_quantity,
                **fields
            )
            session.add(product)
            session.commit()
            return product.id

    return _make_product


@pytest.fixture
def make_user():
    """Insert a user row without going through bcrypt and return its id"""

    def _make_user(username="buyer", email=None, is_active=True, **fields):
        with SessionLocal() as session:
            user = User(
                username=username,
                email=email or f"{username}@example.com",
                password_hash="not-a-real-hash",
                is_active=is_active,
                **fields
            )
            session.add(user)
            session.commit()
            return user.id

    return _make_user


def stock_of(product_id: int) -> int:
    with SessionLocal() as session:
        return session.get(Product, product_id).stock_quantity


@pytest.fixture
def get_stock():
    return stock_of


@pytest.fixture
def register(login_client):
    """Register a user through the API and return the response body"""

    def _register(username="alice", password="secret123", email=None, **fields):
        response = login_client.post("/api/auth/register", json={
            "username": username,
            "email": email or f"{username}@example.com",
            "password": password,
            **fields
        })
        assert response.status_code == 201, response.text
        return response.json()

    return _register


@pytest.fixture
def login(login_client):
    """Log in and return the bearer token"""

    def _login(username_or_email="alice", password="secret123"):
        response = login_client.post("/api/auth/login", json={
            "username_or_email": username_or_email,
            "password": password
        })
        assert response.status_code == 200, response.text
        return response.json()["token"]

    return _login


@pytest.fixture
def auth_headers(register, login):
    register()
    return {"Authorization": f"Bearer {login()}"}
