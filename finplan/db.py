import logging
import os

from alembic.config import Config
from sqlalchemy import Connection, create_engine, event
from sqlalchemy.engine import Engine

from alembic import command
from finplan.settings import settings

logger = logging.getLogger(__name__)

_engine: Engine | None = None
_connection: Connection | None = None


def _is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def _enable_sqlite_foreign_keys(engine: Engine) -> None:
    """SQLite ignores FOREIGN KEY clauses (and ON DELETE CASCADE) unless asked per connection."""

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys = ON")
        cursor.execute("PRAGMA busy_timeout = 5000")
        cursor.close()


def get_engine() -> Engine:
    global _engine
    if _engine is None:
        url = settings.db_url
        if _is_sqlite(url):
            _engine = create_engine(url)
            _enable_sqlite_foreign_keys(_engine)
        else:
            _engine = create_engine(url, pool_pre_ping=True, pool_recycle=1800)
        logger.info("Database engine created (dialect=%s)", _engine.dialect.name)
    return _engine


def get_connection() -> Connection:
    """Singleton connection shared by the CLI and the seed script.

    Web requests open their own connection through DBConnectionMiddleware.
    """
    global _connection
    if _connection is None:
        _connection = get_engine().connect()
        logger.debug("CLI DB connection opened")
    return _connection


def _get_alembic_config() -> Config:
    project_root = os.path.dirname(os.path.dirname(__file__))
    ini_path = os.path.join(project_root, "alembic.ini")
    if not os.path.exists(ini_path):
        ini_path = os.path.join(os.getcwd(), "alembic.ini")
    return Config(ini_path)


def initialize_db() -> None:
    """Upgrade the schema to the latest Alembic revision."""
    logger.info("Upgrading database schema")
    command.upgrade(_get_alembic_config(), "head")
    logger.info("Database schema is up to date")
