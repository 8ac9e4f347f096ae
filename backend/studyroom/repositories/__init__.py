"""
Repository layer for the study room service.

Repositories own all data access; services own transactions and rules.
"""

from studyroom.repositories.base_repository import BaseRepository
from studyroom.repositories.factory import RepositoryFactory
from studyroom.repositories.reservation_repository import ReservationRepository
from studyroom.repositories.room_repository import RoomRepository
from studyroom.repositories.student_repository import StudentRepository

__all__ = [
    "BaseRepository",
    "RepositoryFactory",
    "ReservationRepository",
    "RoomRepository",
    "StudentRepository",
]
