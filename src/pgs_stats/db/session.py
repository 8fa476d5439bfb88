"""Database session management.

Provides engine and session factory creation for the SQLite file that
backs the cache store. Handles are returned to the caller and passed
explicitly into the store; nothing here is consulted implicitly by the
pipeline.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from sqlalchemy import Engine, create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from pgs_stats.config import DEFAULT_DB_PATH
from pgs_stats.db.schema import Base

logger = logging.getLogger(__name__)


def get_engine(db_path: Path | None = None) -> Engine:
    """Create a SQLAlchemy engine for the database.

    Each call returns a new engine; callers keep the handle they need.
    A parent directory that cannot be created is logged, and the engine
    is still returned so that connection errors surface as SQLAlchemyError.

    Args:
        db_path: Path to SQLite database file. Defaults to data/pgs_stats.db.

    Returns:
        SQLAlchemy engine instance.
    """
    if db_path is None:
        db_path = DEFAULT_DB_PATH

    db_path = Path(db_path)
    try:
        db_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.warning(f"Cannot create cache directory {db_path.parent}: {e}")

    return create_engine(f"sqlite:///{db_path}", echo=False)


def get_session_factory(db_path: Path | None = None) -> sessionmaker[Session]:
    """Get a session factory for the database, creating tables if needed.

    A database that cannot be created is logged and the factory is still
    returned; the cache store then treats every read as a miss.

    Args:
        db_path: Path to SQLite database file.

    Returns:
        sessionmaker bound to a new engine.
    """
    engine = get_engine(db_path)
    try:
        Base.metadata.create_all(engine)
    except (SQLAlchemyError, OSError) as e:
        logger.warning(f"Cache database unavailable at {engine.url}: {e}")
    return sessionmaker(bind=engine)


@contextmanager
def get_db_session(factory: sessionmaker[Session]) -> Generator[Session, None, None]:
    """Context manager for database sessions with automatic cleanup.

    Commits on successful exit, rolls back on exception, and always
    closes the session.

    Args:
        factory: Session factory from get_session_factory().

    Yields:
        SQLAlchemy Session instance.
    """
    session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()

