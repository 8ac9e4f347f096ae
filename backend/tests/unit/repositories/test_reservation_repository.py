"""ReservationRepository queries."""

from datetime import date

import pytest

from studyroom.models.reservation import Reservation
from studyroom.models.student import Student
from studyroom.repositories import RepositoryFactory

pytestmark = pytest.mark.unit


@pytest.fixture
def students(db):
    hong = Student(name="Hong", class_identifier="1")
    kim = Student(name="Kim", class_identifier="2")
    lee = Student(name="Lee", class_identifier="3")
    db.add_all([hong, kim, lee])
    db.commit()
    return hong, kim, lee


@pytest.fixture
def repository(db):
    return RepositoryFactory.create_reservation_repository(db)


def _add(db, room, day, hour, first, second):
    reservation = Reservation(
        room_id=room.id,
        reservation_date=day,
        start_hour=hour,
        end_hour=hour + 1,
        student1_id=first.id,
        student2_id=second.id,
    )
    db.add(reservation)
    db.commit()
    return reservation


class TestReservationRepository:
    def test_hours_for_student_counts_either_role(self, db, rooms, students, repository):
        hong, kim, lee = students
        _add(db, rooms["407"], date(2026, 2, 16), 10, hong, kim)
        _add(db, rooms["408"], date(2026, 2, 16), 14, lee, hong)
        _add(db, rooms["409"], date(2026, 2, 17), 10, hong, lee)

        assert repository.get_hours_for_student(hong.id, date(2026, 2, 16)) == 2
        assert repository.get_hours_for_student(kim.id, date(2026, 2, 16)) == 1
        assert repository.get_hours_for_student(lee.id, date(2026, 2, 18)) == 0

    def test_get_for_date_ordered_by_room_then_hour(self, db, rooms, students, repository):
        hong, kim, lee = students
        _add(db, rooms["407"], date(2026, 2, 16), 14, hong, kim)
        _add(db, rooms["407"], date(2026, 2, 16), 9, lee, kim)
        _add(db, rooms["407"], date(2026, 2, 17), 9, lee, kim)

        result = repository.get_for_date(date(2026, 2, 16), load_relationships=True)

        assert [r.start_hour for r in result] == [9, 14]
        assert result[0].student1.name == "Lee"

    def test_get_between_is_inclusive(self, db, rooms, students, repository):
        hong, kim, _ = students
        for day in (15, 16, 21, 22):
            _add(db, rooms["407"], date(2026, 2, day), 10, hong, kim)

        result = repository.get_between(date(2026, 2, 16), date(2026, 2, 21))

        assert [r.reservation_date.day for r in result] == [16, 21]

    def test_delete_before_and_delete_all(self, db, rooms, students, repository):
        hong, kim, _ = students
        _add(db, rooms["407"], date(2026, 2, 8), 10, hong, kim)
        _add(db, rooms["407"], date(2026, 2, 9), 10, hong, kim)
        _add(db, rooms["407"], date(2026, 2, 10), 10, hong, kim)

        assert repository.delete_before(date(2026, 2, 9)) == 1
        db.commit()
        assert db.query(Reservation).count() == 2

        assert repository.delete_all() == 2
        db.commit()
        assert db.query(Reservation).count() == 0


class TestRoomRepository:
    def test_list_ordered(self, db, rooms):
        repository = RepositoryFactory.create_room_repository(db)
        ordered = repository.list_ordered()
        assert [r.room_number for r in ordered] == ["407", "408", "409", "523", "524", "525"]
        assert [r.floor for r in ordered] == [4, 4, 4, 5, 5, 5]

    def test_get_by_number(self, db, rooms):
        repository = RepositoryFactory.create_room_repository(db)
        assert repository.get_by_number("524").id == rooms["524"].id
        assert repository.get_by_number("999") is None
