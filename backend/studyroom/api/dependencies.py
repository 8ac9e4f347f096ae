"""
Dependency providers for the API layer.

Identity comes from the surrounding auth layer as request headers:
``X-User-Id`` names the caller and ``X-Admin-Token`` marks an admin.
"""

import hmac
from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from studyroom.core.config import settings
from studyroom.database import get_db
from studyroom.principal import Actor
from studyroom.services.booking_service import BookingService
from studyroom.services.room_service import RoomService


def get_current_actor(
    x_user_id: Optional[str] = Header(default=None),
    x_admin_token: Optional[str] = Header(default=None),
) -> Actor:
    user_id = (x_user_id or "").strip() or None
    is_admin = False
    if x_admin_token and settings.admin_token is not None:
        expected = settings.admin_token.get_secret_value()
        is_admin = bool(expected) and hmac.compare_digest(x_admin_token, expected)
    return Actor(user_id=user_id, is_admin=is_admin)


def get_booking_service(db: Session = Depends(get_db)) -> BookingService:
    return BookingService(db)


def get_room_service(db: Session = Depends(get_db)) -> RoomService:
    return RoomService(db)
