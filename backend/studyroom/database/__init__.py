"""
Engine, session factory and declarative Base.

SQLite (the default) gets thread-safe connections, enforced foreign keys and,
for ":memory:" URLs, a single shared connection.
"""

from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime
import logging
from typing import Any, Dict, Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeMeta, Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from studyroom.core.config import settings

logger = logging.getLogger(__name__)


def _build_engine_kwargs(db_url: str) -> Dict[str, Any]:
    """Engine options for the configured dialect."""
    if db_url.startswith("sqlite"):
        kwargs: Dict[str, Any] = {"connect_args": {"check_same_thread": False}, "future": True}
        if ":memory:" in db_url:
            kwargs["poolclass"] = StaticPool
        return kwargs
    return {
        "pool_size": 5,
        "max_overflow": 10,
        "pool_timeout": 5,
        "pool_recycle": 300,
        "pool_pre_ping": True,
        "future": True,
    }


engine: Engine = create_engine(settings.database_url, **_build_engine_kwargs(settings.database_url))


# Log pool events for monitoring
@event.listens_for(engine, "connect")
def receive_connect(dbapi_connection: Any, connection_record: Any) -> None:
    connection_record.info["connect_time"] = datetime.now()
    logger.debug("Database connection established")


if settings.is_sqlite:

    @event.listens_for(engine, "connect")
    def _enable_sqlite_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)

Base: DeclarativeMeta = declarative_base()


@contextmanager
def get_db_session() -> Generator[Session, None, None]:
    """Context manager for short-lived DB operations (tasks, scheduler)."""
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency: one session per request, committed when the handler returns."""
    with get_db_session() as db:
        yield db


def init_db() -> None:
    """Create tables that do not exist yet."""
    import studyroom.models  # noqa: F401

    Base.metadata.create_all(bind=engine)


__all__ = [
    "Base",
    "SessionLocal",
    "engine",
    "get_db",
    "get_db_session",
    "init_db",
]
