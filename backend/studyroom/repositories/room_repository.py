"""Room data access."""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from studyroom.models.room import Room
from studyroom.repositories.base_repository import BaseRepository

logger = logging.getLogger(__name__)


class RoomRepository(BaseRepository[Room]):
    def __init__(self, db: Session):
        super().__init__(db, Room)

    def list_ordered(self) -> List[Room]:
        with self._storage_errors("list"):
            return self.db.query(Room).order_by(Room.room_number).all()

    def get_by_number(self, room_number: str) -> Optional[Room]:
        return self.find_one_by(room_number=room_number)

    def upsert(self, room_number: str, floor: int) -> Room:
        """Insert the room or correct its floor if it already exists."""
        room = self.get_by_number(room_number)
        if room is None:
            return self.create(room_number=room_number, floor=floor)
        if room.floor != floor:
            self.logger.info("Correcting floor for room %s: %s -> %s", room_number, room.floor, floor)
            with self._storage_errors("update"):
                room.floor = floor
                self.db.flush()
        return room
