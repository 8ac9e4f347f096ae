"""Slot collision detection."""

from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from studyroom.repositories import RepositoryFactory
from studyroom.repositories.reservation_repository import ReservationRepository
from studyroom.services.base import BaseService


class AvailabilityChecker(BaseService):
    """
    Decides whether a (room, date, start hour) slot is occupied.

    Slots are exactly one hour, so matching room and start hour on the same
    calendar day is the whole collision rule.
    """

    def __init__(self, db: Session, repository: Optional[ReservationRepository] = None):
        super().__init__(db)
        self.repository = repository or RepositoryFactory.create_reservation_repository(db)

    def has_conflict(self, room_id: str, target_date: date, start_hour: int) -> bool:
        conflict = any(
            reservation.room_id == room_id and reservation.start_hour == start_hour
            for reservation in self.repository.get_for_date(target_date)
        )
        if conflict:
            self.logger.info(
                f"Slot taken: room {room_id} on {target_date} at {start_hour}:00"
            )
        return conflict
