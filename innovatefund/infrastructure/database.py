"""Database configuration and session management."""

from __future__ import annotations

import logging
from collections.abc import Generator
from uuid import uuid4

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from innovatefund.config import get_settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for SQLAlchemy models."""


def new_id() -> str:
    """Return a fresh opaque identifier for persisted records."""

    return uuid4().hex


def _build_engine(database_url: str) -> Engine:
    connect_args: dict[str, object] = {}
    if database_url.startswith("sqlite"):
        # Sessions are opened from worker threads by the notification dispatcher.
        connect_args["check_same_thread"] = False
    return create_engine(database_url, pool_pre_ping=True, connect_args=connect_args)


engine = _build_engine(get_settings().database_url)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def configure_database(database_url: str) -> Engine:
    """Rebind the module engine and session factory to ``database_url``."""

    global engine

    engine.dispose()
    engine = _build_engine(database_url)
    SessionLocal.configure(bind=engine)
    logger.info("Database engine bound to %s", engine.url.render_as_string(hide_password=True))
    return engine


def initialize_database() -> None:
    """Ensure all ORM models have corresponding database tables."""

    from innovatefund.infrastructure import models  # noqa: F401  # ensure models are imported

    Base.metadata.create_all(bind=engine, checkfirst=True)


def drop_database() -> None:
    from innovatefund.infrastructure import models  # noqa: F401

    Base.metadata.drop_all(bind=engine, checkfirst=True)


def get_db() -> Generator[Session, None, None]:
    """Yield a database session and close it afterwards."""

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


__all__ = [
    "Base",
    "SessionLocal",
    "configure_database",
    "drop_database",
    "get_db",
    "initialize_database",
    "new_id",
]
