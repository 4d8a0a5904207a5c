"""
Database connection and session management for MedicineReminder
"""

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.pool import StaticPool
from contextlib import contextmanager
from typing import Generator, Optional
import logging

from config import settings


logger = logging.getLogger(__name__)

# Base class for ORM models
Base = declarative_base()


def create_db_engine(url: Optional[str] = None, echo: Optional[bool] = None) -> Engine:
    """
    Create a SQLAlchemy engine for the record and blob stores.

    In-memory SQLite URLs share a single connection so every session sees
    the same database.
    """
    url = url or settings.DATABASE_URL
    echo = settings.DATABASE_ECHO if echo is None else echo

    if url.startswith("sqlite"):
        # SQLite specific configuration
        kwargs = {"connect_args": {"check_same_thread": False}, "echo": echo}
        if ":memory:" in url or url in ("sqlite://", "sqlite:///"):
            kwargs["poolclass"] = StaticPool
        engine = create_engine(url, **kwargs)

        # Enable foreign keys for SQLite
        @event.listens_for(engine, "connect")
        def set_sqlite_pragma(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()
    else:
        # PostgreSQL or other databases
        engine = create_engine(
            url,
            echo=echo,
            pool_size=10,
            max_overflow=20,
            pool_pre_ping=True
        )

    return engine


def create_session_factory(engine: Engine) -> sessionmaker:
    """Create a session factory bound to the given engine"""
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine
    )


@contextmanager
def session_scope(session_factory: sessionmaker) -> Generator[Session, None, None]:
    """
    Context manager for a unit of work.

    Usage:
        with session_scope(SessionLocal) as db:
            db.add(row)
    """
    db = session_factory()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def init_db(engine: Engine) -> None:
    """
    Initialize database tables.
    Creates all tables defined in models.
    """
    # Import models to register them with Base
    import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info(f"Database initialized at: {engine.url}")


def drop_db(engine: Engine) -> None:
    """
    Drop all database tables.
    WARNING: This will delete all data!
    """
    Base.metadata.drop_all(bind=engine)
    logger.info("All database tables dropped")


__all__ = [
    "Base",
    "create_db_engine",
    "create_session_factory",
    "session_scope",
    "init_db",
    "drop_db",
]
