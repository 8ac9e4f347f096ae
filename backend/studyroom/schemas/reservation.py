# backend/studyroom/schemas/reservation.py
"""
Reservation schemas.

Dates travel as ISO ``YYYY-MM-DD`` strings with no time-of-day component.
Range and emptiness rules for hours and names are enforced by the booking
engine. Missing or mistyped fields fail validation here; the create route
reports both kinds as 400 INVALID_INPUT.
"""

from datetime import date, datetime
import re
from typing import Dict, List, Optional

from pydantic import Field, field_validator

from studyroom.schemas.base import StandardizedModel, StrictRequestModel

DATE_ONLY_REGEX = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def _ensure_date_only(value: object, field_name: str) -> object:
    if isinstance(value, str):
        candidate = value.strip()
        if not DATE_ONLY_REGEX.fullmatch(candidate):
            raise ValueError(f"{field_name} must be a YYYY-MM-DD date-only string")
        return candidate
    if isinstance(value, datetime):
        raise ValueError(f"{field_name} must not carry a time of day")
    return value


class StudentIdentity(StrictRequestModel):
    """A participant as typed by the user: name plus class identifier."""

    name: str = Field(..., description="Student name")
    class_identifier: str = Field(..., alias="class", description="Class / cohort identifier")


class ReservationCreate(StrictRequestModel):
    room_id: str = Field(..., description="Room to reserve")
    reservation_date: date = Field(..., alias="date", description="Calendar date (YYYY-MM-DD)")
    start_hour: int = Field(..., description="Start hour, 8..23; the slot lasts one hour")
    student1: StudentIdentity
    student2: StudentIdentity

    @field_validator("reservation_date", mode="before")
    @classmethod
    def _date_only(cls, value: object) -> object:
        return _ensure_date_only(value, "date")


class StudentResponse(StandardizedModel):
    id: str
    name: str
    class_identifier: str


class ReservationResponse(StandardizedModel):
    id: str
    room_id: str
    room_number: Optional[str] = None
    reservation_date: date
    start_hour: int
    end_hour: int
    student1: StudentResponse
    student2: StudentResponse
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_reservation(cls, reservation: object) -> "ReservationResponse":
        response = cls.model_validate(reservation)
        room = getattr(reservation, "room", None)
        if room is not None:
            response.room_number = room.room_number
        return response


class WeekReservationsResponse(StandardizedModel):
    start_date: date
    end_date: date
    days: Dict[str, List[ReservationResponse]]


class CleanupResponse(StandardizedModel):
    success: bool = True
    deleted: int
    cutoff_date: date
