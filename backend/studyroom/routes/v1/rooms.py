"""
Room routes - API v1

Endpoints:
    GET / - The six study rooms (seeded on first call)
"""

from typing import List

from fastapi import APIRouter, Depends

from studyroom.api.dependencies import get_room_service
from studyroom.schemas.room import RoomResponse
from studyroom.services.room_service import RoomService

router = APIRouter(tags=["rooms-v1"])


@router.get("", response_model=List[RoomResponse])
def list_rooms(room_service: RoomService = Depends(get_room_service)) -> List[RoomResponse]:
    return [RoomResponse.model_validate(room) for room in room_service.list_rooms()]
