# backend/studyroom/repositories/factory.py
"""
Repository Factory for the study room service.

Provides centralized creation of repository instances,
ensuring consistent initialization and dependency injection.
"""

from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

# Avoid circular imports
if TYPE_CHECKING:
    from studyroom.repositories.reservation_repository import ReservationRepository
    from studyroom.repositories.room_repository import RoomRepository
    from studyroom.repositories.student_repository import StudentRepository


class RepositoryFactory:
    """Factory class for creating repository instances."""

    @staticmethod
    def create_room_repository(db: Session) -> "RoomRepository":
        from studyroom.repositories.room_repository import RoomRepository

        return RoomRepository(db)

    @staticmethod
    def create_student_repository(db: Session) -> "StudentRepository":
        from studyroom.repositories.student_repository import StudentRepository

        return StudentRepository(db)

    @staticmethod
    def create_reservation_repository(db: Session) -> "ReservationRepository":
        from studyroom.repositories.reservation_repository import ReservationRepository

        return ReservationRepository(db)
