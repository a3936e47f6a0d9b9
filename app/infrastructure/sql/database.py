from __future__ import annotations

import logging

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

Base = declarative_base()

_IN_MEMORY_URLS = {"sqlite://", "sqlite:///:memory:"}


def create_db_engine(database_url: str, pool_size: int = 5, max_overflow: int = 10) -> Engine:
    """Create an engine; SQLite connections get foreign key enforcement."""
    if database_url.startswith("sqlite"):
        extra = {}
        if database_url in _IN_MEMORY_URLS:
            # One shared connection, otherwise each connection sees an empty database
            extra["poolclass"] = StaticPool
        engine = create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            echo=False,
            **extra,
        )

        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, _connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    else:
        engine = create_engine(
            database_url,
            pool_pre_ping=True,  # Test connections before using
            pool_size=pool_size,
            max_overflow=max_overflow,
            echo=False,
        )
    logger.info("Database engine created", extra={"reason": engine.dialect.name})
    return engine


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


def init_schema(engine: Engine) -> None:
    # Import models so they register on Base.metadata
    from app.infrastructure.sql import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
