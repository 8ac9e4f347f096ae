# backend/studyroom/repositories/reservation_repository.py
"""
Reservation Repository for the study room service.

Owns every query against the ``reservations`` table: the per-date read used
by the availability check, the per-student hour sum used by the quota check,
and the bulk deletes used by the janitor purge and the weekly reset.
"""

from datetime import date
import logging
from typing import List

from sqlalchemy import delete, func, or_
from sqlalchemy.orm import Query, Session, joinedload

from studyroom.models.reservation import Reservation
from studyroom.repositories.base_repository import BaseRepository

logger = logging.getLogger(__name__)


class ReservationRepository(BaseRepository[Reservation]):
    """Data access for reservations."""

    def __init__(self, db: Session):
        super().__init__(db, Reservation)

    def _apply_eager_loading(self, query: Query) -> Query:
        return query.options(
            joinedload(Reservation.room),
            joinedload(Reservation.student1),
            joinedload(Reservation.student2),
        )

    def get_for_date(self, target_date: date, load_relationships: bool = False) -> List[Reservation]:
        """
        All reservations on one calendar day, ordered by room then hour.

        Args:
            target_date: The calendar day
            load_relationships: Eager load room and students for display
        """
        with self._storage_errors("list"):
            query = self.db.query(Reservation).filter(Reservation.reservation_date == target_date)
            if load_relationships:
                query = self._apply_eager_loading(query)
            return query.order_by(Reservation.room_id, Reservation.start_hour).all()

    def get_between(self, start_date: date, end_date: date) -> List[Reservation]:
        """Reservations with start_date <= date <= end_date, eager loaded."""
        with self._storage_errors("list"):
            query = self._apply_eager_loading(
                self.db.query(Reservation).filter(
                    Reservation.reservation_date >= start_date,
                    Reservation.reservation_date <= end_date,
                )
            )
            return query.order_by(
                Reservation.reservation_date, Reservation.room_id, Reservation.start_hour
            ).all()

    def get_hours_for_student(self, student_id: str, target_date: date) -> int:
        """Sum of (end_hour - start_hour) for the student in either role on ``target_date``."""
        with self._storage_errors("sum hours of"):
            total = (
                self.db.query(func.sum(Reservation.end_hour - Reservation.start_hour))
                .filter(
                    Reservation.reservation_date == target_date,
                    or_(
                        Reservation.student1_id == student_id,
                        Reservation.student2_id == student_id,
                    ),
                )
                .scalar()
            )
        return int(total or 0)

    def delete_before(self, cutoff: date) -> int:
        """Delete reservations dated strictly before ``cutoff``. Returns the row count."""
        with self._storage_errors("purge"):
            result = self.db.execute(
                delete(Reservation)
                .where(Reservation.reservation_date < cutoff)
                .execution_options(synchronize_session=False)
            )
        return int(result.rowcount or 0)

    def delete_all(self) -> int:
        """Delete every reservation. Returns the row count."""
        with self._storage_errors("reset"):
            result = self.db.execute(
                delete(Reservation).execution_options(synchronize_session=False)
            )
        return int(result.rowcount or 0)
