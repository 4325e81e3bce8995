"""
Database Connection Module
Builds the in-memory SQLite store behind the repositories.

Every engine owns its own private database: SQLite keeps an in-memory
database per connection, so the engine is pinned to one shared connection
(StaticPool) and everything is lost when the engine is disposed.
"""

import logging
from typing import Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from restodesk.core.config import get_settings

logger = logging.getLogger(__name__)


# Base class for all our models
class Base(DeclarativeBase):
    pass


def create_store_engine(database_url: Optional[str] = None, echo: bool = False) -> Engine:
    """
    Create an engine for the in-memory store.

    Args:
        database_url: SQLAlchemy URL (defaults to settings.database_url)
        echo: Log all SQL statements

    Returns:
        Engine: Engine pinned to a single connection
    """
    url = database_url or get_settings().database_url

    engine = create_engine(
        url,
        echo=echo,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return engine


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Session factory bound to the given engine."""
    return sessionmaker(
        bind=engine,
        expire_on_commit=False,  # Objects remain accessible after commit
    )


def init_db(engine: Engine) -> None:
    """
    Create all tables in the store.
    Called once when an ordering system is built.
    """
    # Registers the mapped classes on Base.metadata
    from restodesk import models  # noqa: F401

    Base.metadata.create_all(engine)
    logger.info("✅ In-memory store tables created")
