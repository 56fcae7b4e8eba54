"""
Database Connection and Session Management for SQLAlchemy.

This module sets up and manages database connections and sessions:

- **Global Engine**: A lazily created singleton `Engine` owns the connection
  pool for the process.
- **Session Factory**: A `sessionmaker` bound to that engine produces the
  `Session` objects that repositories operate on.
- **Transactional Context Manager**: `get_db` yields a `Session` inside a
  well-defined transactional scope, committing on success, rolling back on
  error and always closing the session.
"""

from __future__ import annotations

from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from .config import get_config
from .logger import log_event
from .models import Base

_engine: Engine | None = None
_SessionLocal: sessionmaker[Session] | None = None


def _engine_options(url: str) -> dict[str, Any]:
    """
    Chooses pool settings appropriate for the database behind `url`.

    In-memory SQLite databases live inside a single connection, so they are
    served from a `StaticPool` to keep every session on the same database.
    """
    config = get_config()
    if url.startswith("sqlite"):
        options: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite+pysqlite://") or ":memory:" in url:
            options["poolclass"] = StaticPool
        return options
    return {
        "pool_pre_ping": True,
        "pool_size": config.db_pool_size,
        "max_overflow": config.db_max_overflow,
    }


def get_engine() -> Engine:
    """
    Retrieves the global SQLAlchemy engine, creating it if necessary.

    Returns:
        Engine: The singleton SQLAlchemy `Engine` instance.
    """
    global _engine
    if _engine is None:
        config = get_config()
        url = config.get_database_url()
        _engine = create_engine(url, echo=config.db_echo, **_engine_options(url))
        log_event("INFO", "engine_created", **config.log_summary())
    return _engine


def get_session_factory() -> sessionmaker[Session]:
    """
    Retrieves the global SQLAlchemy session factory, creating it if necessary.

    Sessions are created with `autoflush=False`; repositories flush explicitly
    after every write so generated keys and constraint errors surface at the
    call that caused them.

    Returns:
        sessionmaker[Session]: The singleton `sessionmaker` instance.
    """
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=get_engine(),
        )
    return _SessionLocal


@contextmanager
def get_db() -> Generator[Session, None, None]:
    """
    Provides a transactional database session via a context manager.

    Usage:
    ```
    with get_db() as session:
        customers = CustomerRepository(session)
        customers.save(Customer.builder().username("ces518").password("pjy3859").build())
    # Committed on success, rolled back on exception, closed in all cases.
    ```

    Yields:
        Session: A new SQLAlchemy `Session` object ready for use.
    """
    SessionLocal = get_session_factory()
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def reset_engine() -> None:
    """
    Disposes the global engine and forgets the session factory.

    Intended for tests that switch `DATABASE_URL` between cases.
    """
    global _engine, _SessionLocal
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _SessionLocal = None


def create_tables() -> None:
    """
    Creates all tables defined in the declarative models that do not exist yet.

    Note:
        Suitable for development and tests. Schema changes on an existing
        database are managed by the Alembic migrations under `alembic/`.
    """
    Base.metadata.create_all(bind=get_engine())


def drop_tables() -> None:
    """
    Drops all tables defined in the declarative models.

    Warning:
        Permanently deletes all data. Only for development and tests.
    """
    Base.metadata.drop_all(bind=get_engine())


def init_db() -> None:
    """Initializes the database schema; an alias for `create_tables`."""
    create_tables()
