# backend/tests/conftest.py
"""
Shared pytest fixtures.

Every test gets a fresh in-memory SQLite database, a fixed local clock
(Monday 2026-02-16 09:00 Asia/Seoul) and, where needed, a TestClient wired to
both.
"""

import os

# Set testing mode BEFORE any studyroom imports
os.environ["IS_TESTING"] = "true"
os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["WEEKLY_RESET_ENABLED"] = "false"
os.environ["REDIS_URL"] = ""
os.environ["TIMEZONE"] = "Asia/Seoul"

from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Iterator

from fastapi import Depends
from fastapi.testclient import TestClient
import pytest
import pytz
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from studyroom.api.dependencies import get_booking_service
from studyroom.database import Base, get_db
import studyroom.models  # noqa: F401
from studyroom.models.room import Room
from studyroom.schemas.reservation import ReservationCreate
from studyroom.services.booking_service import BookingService
from studyroom.services.room_service import RoomService

SEOUL = pytz.timezone("Asia/Seoul")


class FakeClock:
    """Manually driven local clock."""

    def __init__(self, now: datetime) -> None:
        self._tz = SEOUL
        self._now = now

    @property
    def tz(self) -> pytz.BaseTzInfo:
        return self._tz

    def now(self) -> datetime:
        return self._now

    def set(self, now: datetime) -> None:
        self._now = now

    def advance(self, seconds: float) -> None:
        self._now = (self._now + timedelta(seconds=seconds)).astimezone(self._tz)


def seoul(*args: int) -> datetime:
    return SEOUL.localize(datetime(*args))


def _enable_foreign_keys(engine: Engine) -> None:
    @event.listens_for(engine, "connect")
    def _fk_pragma(dbapi_connection: Any, connection_record: Any) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


@pytest.fixture
def engine() -> Iterator[Engine]:
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        future=True,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    _enable_foreign_keys(engine)
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(
        bind=engine, autocommit=False, autoflush=False, expire_on_commit=False, future=True
    )


@pytest.fixture
def db(session_factory: sessionmaker) -> Iterator[Session]:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def file_engine(tmp_path) -> Iterator[Engine]:
    """File-backed database so each thread gets its own connection."""
    engine = create_engine(
        f"sqlite+pysqlite:///{tmp_path / 'studyroom.db'}",
        future=True,
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    _enable_foreign_keys(engine)
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(seoul(2026, 2, 16, 9, 0))


@pytest.fixture
def rooms(db: Session) -> Dict[str, Room]:
    """The six seeded rooms keyed by room number."""
    return {room.room_number: room for room in RoomService(db).seed_rooms()}


@pytest.fixture
def booking_service(db: Session, clock: FakeClock) -> BookingService:
    return BookingService(db, clock=clock)


@pytest.fixture
def make_request() -> Callable[..., ReservationCreate]:
    def _make(
        room_id: str,
        day: str = "2026-02-16",
        start_hour: int = 10,
        student1: tuple = ("Hong", "1"),
        student2: tuple = ("Kim", "2"),
    ) -> ReservationCreate:
        return ReservationCreate.model_validate(
            {
                "room_id": room_id,
                "date": day,
                "start_hour": start_hour,
                "student1": {"name": student1[0], "class": student1[1]},
                "student2": {"name": student2[0], "class": student2[1]},
            }
        )

    return _make


@pytest.fixture
def client(session_factory: sessionmaker, clock: FakeClock) -> Iterator[TestClient]:
    from studyroom.main import app

    def override_get_db() -> Iterator[Session]:
        session = session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def override_get_booking_service(db: Session = Depends(get_db)) -> BookingService:
        return BookingService(db, clock=clock)

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_booking_service] = override_get_booking_service
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
