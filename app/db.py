"""
Database engine, session factory and FastAPI dependency.

The engine is built once per process from settings. SQLite URLs (used by the
test suite) get a static pool so an in-memory database survives across
sessions.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from app.config import Settings, get_settings

Base = declarative_base()


def create_db_engine(settings: Settings) -> Engine:
    url = settings.database_url_obj
    if url.get_backend_name() == "sqlite":
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(
        url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        pool_pre_ping=True,
        connect_args={"application_name": settings.app_name},
    )


class DatabaseManager:
    """Owns the engine and session factory for the process."""

    def __init__(self, settings: Settings) -> None:
        self.engine = create_db_engine(settings)
        self.SessionLocal = sessionmaker(
            autocommit=False, autoflush=False, bind=self.engine
        )

    @contextmanager
    def db_session(self) -> Iterator[Session]:
        """Session scope for tasks and scripts: rollback on error, always close."""
        db = self.SessionLocal()
        try:
            yield db
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()


db_manager = DatabaseManager(get_settings())
engine = db_manager.engine
SessionLocal = db_manager.SessionLocal


def get_db() -> Iterator[Session]:
    """FastAPI dependency yielding a request-scoped session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
