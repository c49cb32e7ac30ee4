"""Root conftest: in-memory SQLite engine and fixtures for the full schema."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

import pytest
from sqlalchemy import Connection, create_engine, event, text
from sqlalchemy.engine import Engine

from finplan.models.bill import Bill
from finplan.models.planning import Planning
from finplan.models.user import User

# Matches Alembic head: 3f9a1c2d7e10 (initial schema)
SCHEMA_DDL = """
CREATE TABLE users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    uuid VARCHAR(26) NOT NULL UNIQUE,
    name VARCHAR(155) NOT NULL,
    email VARCHAR(255) NOT NULL,
    birthdate DATE,
    salary NUMERIC(12, 2),
    password_hash TEXT NOT NULL,
    created_at DATETIME NOT NULL,
    updated_at DATETIME NOT NULL,
    deleted_at DATETIME
);

CREATE TABLE bills (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    uuid VARCHAR(26) NOT NULL UNIQUE,
    user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    name VARCHAR(155) NOT NULL,
    value NUMERIC(12, 2) NOT NULL,
    description TEXT,
    installments_number INTEGER,
    created_at DATETIME NOT NULL,
    updated_at DATETIME NOT NULL,
    deleted_at DATETIME
);

CREATE TABLE plannings (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    uuid VARCHAR(26) NOT NULL UNIQUE,
    user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    name VARCHAR(155) NOT NULL,
    goal VARCHAR(500) NOT NULL,
    goal_value NUMERIC(12, 2) NOT NULL,
    plan TEXT NOT NULL,
    description TEXT,
    created_at DATETIME NOT NULL,
    updated_at DATETIME NOT NULL,
    deleted_at DATETIME
);
"""


@pytest.fixture()
def db_engine() -> Engine:
    engine = create_engine("sqlite://")

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


@pytest.fixture()
def db_connection(db_engine: Engine) -> Connection:
    with db_engine.connect() as conn:
        yield conn


@pytest.fixture()
def sample_user() -> User:
    return User(
        name="Maria Silva",
        email="maria@example.com",
        salary=Decimal("5000.00"),
        password_hash="hashed",
    )


@pytest.fixture()
def make_bill():
    """Factory for bills; ``created_at`` defaults to a fixed moment."""

    def _make(**overrides) -> Bill:
        defaults = dict(
            user_id=1,
            name="Aluguel",
            value=Decimal("1000.00"),
            created_at=datetime(2026, 10, 5, 12, 0),
        )
        defaults.update(overrides)
        return Bill(**defaults)

    return _make


@pytest.fixture()
def sample_planning() -> Planning:
    return Planning(
        user_id=1,
        name="Reserva",
        goal="Juntar reserva de emergência",
        goal_value=Decimal("10000.00"),
        plan="Guardar 20% do salário por mês.",
    )
