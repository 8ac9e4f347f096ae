from studyroom.schemas.base import StandardizedModel


class RoomResponse(StandardizedModel):
    id: str
    room_number: str
    floor: int
