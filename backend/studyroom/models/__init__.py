"""
Database models for the study room service.

- Room: the six fixed study rooms
- Student: participant identity, unique by (name, class identifier)
- Reservation: one-hour occupancy of a room by two students
"""

from studyroom.models.reservation import Reservation
from studyroom.models.room import Room
from studyroom.models.student import Student

__all__ = ["Reservation", "Room", "Student"]
