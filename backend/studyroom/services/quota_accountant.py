"""Per-student daily hour accounting."""

from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from studyroom.repositories import RepositoryFactory
from studyroom.repositories.reservation_repository import ReservationRepository
from studyroom.services.base import BaseService


class QuotaAccountant(BaseService):
    def __init__(self, db: Session, repository: Optional[ReservationRepository] = None):
        super().__init__(db)
        self.repository = repository or RepositoryFactory.create_reservation_repository(db)

    def hours_booked(self, student_id: str, target_date: date) -> int:
        """Hours the student holds on ``target_date`` as either participant. 0 if none."""
        return self.repository.get_hours_for_student(student_id, target_date)
