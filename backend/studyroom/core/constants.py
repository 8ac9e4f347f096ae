"""Static data and booking rules for the study rooms."""

from typing import Final, Tuple, TypedDict


class RoomSeed(TypedDict):
    room_number: str
    floor: int


ROOM_SEED: Final[Tuple[RoomSeed, ...]] = (
    {"room_number": "407", "floor": 4},
    {"room_number": "408", "floor": 4},
    {"room_number": "409", "floor": 4},
    {"room_number": "523", "floor": 5},
    {"room_number": "524", "floor": 5},
    {"room_number": "525", "floor": 5},
)

# Bookable start hours, inclusive. The last slot runs 23:00-24:00.
FIRST_START_HOUR: Final = 8
LAST_START_HOUR: Final = 23

SLOT_LENGTH_HOURS: Final = 1

# Mon..Sat are bookable; the UI renders a six-day week
DAYS_PER_BOOKING_WEEK: Final = 6
SUNDAY: Final = 6  # date.weekday()
