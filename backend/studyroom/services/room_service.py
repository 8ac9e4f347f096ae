"""
Room listing and seeding.

The six rooms are static seed data. Listing seeds them on first use, and
read failures degrade to an empty list because the seed can always be
re-applied later.
"""

from typing import List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from studyroom.core.constants import ROOM_SEED
from studyroom.core.exceptions import RepositoryException, ServiceException
from studyroom.models.room import Room
from studyroom.repositories import RepositoryFactory
from studyroom.repositories.room_repository import RoomRepository
from studyroom.services.base import BaseService


class RoomService(BaseService):
    def __init__(self, db: Session, repository: Optional[RoomRepository] = None):
        super().__init__(db)
        self.repository = repository or RepositoryFactory.create_room_repository(db)

    @BaseService.measure_operation("list_rooms")
    def list_rooms(self) -> List[Room]:
        try:
            rooms = self.repository.list_ordered()
            if not rooms:
                self.logger.info("No rooms found, seeding defaults")
                self._seed_or_accept_concurrent_seed()
                rooms = self.repository.list_ordered()
            return rooms
        except (RepositoryException, SQLAlchemyError, ServiceException) as exc:
            self.logger.warning(f"Room listing unavailable, returning empty list: {exc}")
            self.db.rollback()
            return []

    def _seed_or_accept_concurrent_seed(self) -> None:
        try:
            self.seed_rooms()
        except ServiceException as exc:
            if not isinstance(exc.__cause__, IntegrityError):
                raise
            # Another worker inserted the same rooms first; its rows are the seed
            self.logger.info("Rooms were seeded concurrently, re-reading")

    @BaseService.measure_operation("seed_rooms")
    def seed_rooms(self) -> List[Room]:
        """Insert missing rooms and correct the floor of existing ones."""
        with self.transaction():
            rooms = [
                self.repository.upsert(seed["room_number"], seed["floor"]) for seed in ROOM_SEED
            ]
        self.logger.info(f"Seeded {len(rooms)} rooms")
        return rooms
