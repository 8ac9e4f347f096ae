# backend/studyroom/models/room.py
"""Room model. Rows are static seed data."""

from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import ulid

from studyroom.database import Base


class Room(Base):
    __tablename__ = "study_rooms"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    room_number = Column(String(10), nullable=False, unique=True)
    floor = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    reservations = relationship(
        "Reservation",
        back_populates="room",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Room {self.room_number} floor={self.floor}>"
