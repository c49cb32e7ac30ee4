"""Web test fixtures: TestClient with shared in-memory SQLite."""

from __future__ import annotations

from decimal import Decimal

import pytest
from sqlalchemy import create_engine, event, text
from sqlalchemy.pool import StaticPool

from finplan.models.bill import Bill
from finplan.models.user import User
from finplan.repositories.sqlalchemy import SQLAlchemyBillRepository, SQLAlchemyUserRepository
from tests.conftest import SCHEMA_DDL

TEST_EMAIL = "maria@example.com"
TEST_PASSWORD = "testpass"


def _make_test_engine():
    """Create a fresh in-memory SQLite engine with shared connection pool."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _set_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys = ON")
        cursor.close()

    with engine.connect() as conn:
        for statement in SCHEMA_DDL.strip().split(";"):
            stmt = statement.strip()
            if stmt:
                conn.execute(text(stmt))
        conn.commit()

    return engine


def get_user_by_email(engine, email: str = TEST_EMAIL) -> User | None:
    with engine.connect() as conn:
        return SQLAlchemyUserRepository(conn).get_by_email(email)


def create_other_user(engine, email: str = "joao@example.com") -> User:
    with engine.connect() as conn:
        return SQLAlchemyUserRepository(conn).create(User(name="João Lima", email=email, password_hash="x"))


def create_bill_in_db(engine, user: User, **overrides) -> Bill:
    """Insert a bill directly, bypassing the API. Shared helper for route tests."""
    defaults = dict(user_id=user.id, name="Aluguel", value=Decimal("1800.00"))
    defaults.update(overrides)
    with engine.connect() as conn:
        return SQLAlchemyBillRepository(conn).create(Bill(**defaults))


@pytest.fixture(autouse=True)
def web_test_db(monkeypatch):
    """Set up in-memory DB and patch the web app to use it."""
    engine = _make_test_engine()

    import web.deps as deps_module

    monkeypatch.setattr(deps_module, "get_engine", lambda: engine)

    import web.app as app_module

    monkeypatch.setattr(app_module, "initialize_db", lambda: None)

    import web.auth as auth_module

    auth_module._login_attempts.clear()

    yield engine

    engine.dispose()


@pytest.fixture()
def test_engine(web_test_db):
    return web_test_db


@pytest.fixture()
def client():
    from starlette.testclient import TestClient

    from web.app import app

    return TestClient(app)


@pytest.fixture()
def auth_client(client):
    """Client that has signed up and holds a session cookie."""
    response = client.post(
        "/signup",
        json={"name": "Maria Silva", "email": TEST_EMAIL, "password": TEST_PASSWORD, "salary": "5000.00"},
    )
    assert response.status_code == 201
    return client


@pytest.fixture()
def auth_user(auth_client, test_engine) -> User:
    return get_user_by_email(test_engine)
