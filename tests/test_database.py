"""
Tests for session handling and product row locking
"""
import pytest
from sqlalchemy.exc import OperationalError

from storefront import database
from storefront.config import CommonSettings
from storefront.database import get_db
from storefront.product_service.repositories.product_repository import ProductRepository


def fail_request(connection_invalidated):
    sessions = get_db()
    next(sessions)
    error = OperationalError(
        "SELECT 1", {}, Exception("server closed the connection"),
        connection_invalidated=connection_invalidated
    )
    with pytest.raises(OperationalError):
        sessions.throw(error)


@pytest.fixture
def dispose_calls(monkeypatch):
    calls = []
    monkeypatch.setattr(database.engine, "dispose", lambda *args, **kwargs: calls.append(1))
    return calls


def test_lost_connection_resets_pool(dispose_calls):
    fail_request(connection_invalidated=True)

    assert len(dispose_calls) == 1


def test_other_operational_errors_keep_pool(dispose_calls):
    fail_request(connection_invalidated=False)

    assert dispose_calls == []


def test_lock_active_returns_active_products_only(make_product, db_session):
    second = make_product(name="Second")
    first = make_product(name="First")
    hidden = make_product(name="Hidden", is_active=False)

    locked = ProductRepository(db_session).lock_active([second, hidden, first, second, 999999])

    assert sorted(locked) == sorted([first, second])
    assert locked[first].name == "First"
    assert locked[second].name == "Second"


def test_default_url_names_the_driver():
    default = CommonSettings.model_fields["DATABASE_URL"].default
    assert default.startswith("postgresql+psycopg2://")
