"""
Database Session Management
===========================

SQLAlchemy connection handling. SQLite for development and tests,
PostgreSQL (or any SQLAlchemy URL) via DATABASE_URL in production.
"""

import os
from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import QueuePool

from ..config import get_settings
from .models import Base

_engine = None
_engine_url = None

# Session factory is configured lazily (tests set DATABASE_URL at runtime).
SessionLocal = sessionmaker(autocommit=False, autoflush=False)


def _current_database_url() -> str:
    return os.environ.get("DATABASE_URL") or get_settings().database_url


def _create_engine_for_url(database_url: str):
    echo = get_settings().sql_echo
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            echo=echo,
        )

    return create_engine(
        database_url,
        poolclass=QueuePool,
        pool_size=5,
        max_overflow=10,
        pool_pre_ping=True,
        connect_args={
            "connect_timeout": int(os.environ.get("DB_CONNECT_TIMEOUT", "5")),
        },
        echo=echo,
    )


def get_engine():
    """Get the SQLAlchemy engine"""
    global _engine, _engine_url
    database_url = _current_database_url()
    if _engine is None or _engine_url != database_url:
        if _engine is not None:
            _engine.dispose()
        _engine = _create_engine_for_url(database_url)
        _engine_url = database_url
        SessionLocal.configure(bind=_engine)
    return _engine


def reset_engine():
    """Reset engine/sessionmaker (primarily for tests)."""
    global _engine, _engine_url
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _engine_url = None
    SessionLocal.configure(bind=None)


def init_db():
    """Initialize database tables"""
    engine = get_engine()
    Base.metadata.create_all(bind=engine)


def get_db() -> Generator[Session, None, None]:
    """
    Dependency for FastAPI to get database session.

    Usage:
        @router.get("/items")
        def read_items(db: Session = Depends(get_db)):
            ...
    """
    get_engine()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def get_db_session() -> Generator[Session, None, None]:
    """
    Context manager for database session.

    Usage:
        with get_db_session() as db:
            db.query(User).all()
    """
    get_engine()
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
