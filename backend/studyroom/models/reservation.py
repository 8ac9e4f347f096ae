# backend/studyroom/models/reservation.py
"""
Reservation model.

One row is a one-hour occupancy of one room by two students on one calendar
date. ``reservation_date`` is a plain DATE so comparisons never carry a
time-of-day component. ``created_by`` is nullable: anonymous bookings have no
owner rather than a sentinel id.
"""

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import ulid

from studyroom.core.constants import FIRST_START_HOUR, LAST_START_HOUR, SLOT_LENGTH_HOURS
from studyroom.database import Base


class Reservation(Base):
    __tablename__ = "reservations"
    __table_args__ = (
        # Storage-level backstop against double booking
        UniqueConstraint(
            "room_id", "reservation_date", "start_hour", name="uq_reservations_room_date_hour"
        ),
        CheckConstraint(
            f"start_hour >= {FIRST_START_HOUR} AND start_hour <= {LAST_START_HOUR}",
            name="ck_reservations_start_hour_range",
        ),
        CheckConstraint(
            f"end_hour = start_hour + {SLOT_LENGTH_HOURS}",
            name="ck_reservations_one_hour_slot",
        ),
        Index("ix_reservations_date_student1", "reservation_date", "student1_id"),
        Index("ix_reservations_date_student2", "reservation_date", "student2_id"),
    )

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    room_id = Column(
        String(26), ForeignKey("study_rooms.id", ondelete="CASCADE"), nullable=False
    )
    reservation_date = Column(Date, nullable=False, index=True)
    start_hour = Column(Integer, nullable=False)
    end_hour = Column(Integer, nullable=False)
    student1_id = Column(String(26), ForeignKey("students.id", ondelete="CASCADE"), nullable=False)
    student2_id = Column(String(26), ForeignKey("students.id", ondelete="CASCADE"), nullable=False)
    created_by = Column(String(64), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    room = relationship("Room", back_populates="reservations")
    student1 = relationship("Student", foreign_keys=[student1_id])
    student2 = relationship("Student", foreign_keys=[student2_id])

    def __repr__(self) -> str:
        return (
            f"<Reservation {self.id} room={self.room_id} "
            f"{self.reservation_date} {self.start_hour}-{self.end_hour}>"
        )
