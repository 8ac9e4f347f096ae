"""Celery maintenance task and beat schedule."""

from contextlib import contextmanager
from datetime import date, timedelta
from unittest.mock import patch

import pytest

from studyroom.models.reservation import Reservation
from studyroom.models.student import Student
from studyroom.tasks import reservation_maintenance
from studyroom.tasks.beat_schedule import CELERYBEAT_SCHEDULE

pytestmark = pytest.mark.unit


@pytest.fixture
def patched_session(db):
    @contextmanager
    def _session():
        yield db
        db.commit()

    with patch.object(reservation_maintenance, "get_db_session", _session):
        yield db


def _add_reservation(db, room, day):
    first = Student(name=f"A{day.isoformat()}", class_identifier="1")
    second = Student(name=f"B{day.isoformat()}", class_identifier="1")
    db.add_all([first, second])
    db.flush()
    db.add(
        Reservation(
            room_id=room.id,
            reservation_date=day,
            start_hour=10,
            end_hour=11,
            student1_id=first.id,
            student2_id=second.id,
        )
    )
    db.commit()


class TestCleanupOldReservations:
    def test_removes_only_stale_rows(self, patched_session, rooms):
        db = patched_session
        today = date.today()
        _add_reservation(db, rooms["407"], today - timedelta(days=30))
        _add_reservation(db, rooms["408"], today + timedelta(days=1))

        result = reservation_maintenance.cleanup_old_reservations(7)

        assert result["status"] == "success"
        assert result["deleted"] == 1
        assert db.query(Reservation).count() == 1

    def test_defaults_to_configured_retention(self, patched_session, rooms):
        with patch.object(reservation_maintenance.settings, "retention_days", 3):
            result = reservation_maintenance.cleanup_old_reservations()
        assert result["deleted"] == 0
        assert date.fromisoformat(result["cutoff_date"]) <= date.today() - timedelta(days=2)


class TestBeatSchedule:
    def test_daily_cleanup_entry(self):
        entry = CELERYBEAT_SCHEDULE["cleanup-old-reservations"]
        assert entry["task"] == "reservations.cleanup_old_reservations"
        assert entry["schedule"].hour == {3}
        assert entry["schedule"].minute == {0}
