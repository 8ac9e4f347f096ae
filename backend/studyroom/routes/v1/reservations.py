"""
Reservation routes - API v1

All business logic delegated to BookingService.

Endpoints:
    GET / - Reservations for one date (?date=YYYY-MM-DD)
    GET /week - Reservations for six days starting at ?start=YYYY-MM-DD
    POST / - Create a reservation
    POST /cleanup - Purge reservations older than the retention window
    GET /{reservation_id} - One reservation
    DELETE /{reservation_id} - Delete a reservation (creator or admin)
"""

from datetime import date
import logging
from typing import List

from fastapi import APIRouter, Depends, Query, Response, status

from studyroom.api.dependencies import get_booking_service, get_current_actor
from studyroom.core.config import settings
from studyroom.errors import reports_invalid_input
from studyroom.principal import Actor
from studyroom.schemas.reservation import (
    CleanupResponse,
    ReservationCreate,
    ReservationResponse,
    WeekReservationsResponse,
)
from studyroom.services.booking_service import BookingService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["reservations-v1"])


@router.get("", response_model=List[ReservationResponse])
def get_reservations(
    target_date: date = Query(..., alias="date", description="Calendar date (YYYY-MM-DD)"),
    booking_service: BookingService = Depends(get_booking_service),
) -> List[ReservationResponse]:
    return [
        ReservationResponse.from_reservation(r)
        for r in booking_service.get_reservations(target_date)
    ]


@router.get("/week", response_model=WeekReservationsResponse)
def get_week_reservations(
    start: date = Query(..., description="First day of the six-day view (YYYY-MM-DD)"),
    booking_service: BookingService = Depends(get_booking_service),
) -> WeekReservationsResponse:
    by_date = booking_service.get_reservations_for_week(start)
    days = sorted(by_date)
    return WeekReservationsResponse(
        start_date=date.fromisoformat(days[0]),
        end_date=date.fromisoformat(days[-1]),
        days={
            day: [ReservationResponse.from_reservation(r) for r in reservations]
            for day, reservations in by_date.items()
        },
    )


@router.post("", response_model=ReservationResponse, status_code=status.HTTP_201_CREATED)
@reports_invalid_input
def create_reservation(
    payload: ReservationCreate,
    actor: Actor = Depends(get_current_actor),
    booking_service: BookingService = Depends(get_booking_service),
) -> ReservationResponse:
    reservation = booking_service.book(payload, actor)
    return ReservationResponse.from_reservation(reservation)


@router.post("/cleanup", response_model=CleanupResponse)
def cleanup_old_reservations(
    booking_service: BookingService = Depends(get_booking_service),
) -> CleanupResponse:
    deleted, cutoff = booking_service.purge_older_than(settings.retention_days)
    return CleanupResponse(deleted=deleted, cutoff_date=cutoff)


@router.get("/{reservation_id}", response_model=ReservationResponse)
def get_reservation(
    reservation_id: str,
    booking_service: BookingService = Depends(get_booking_service),
) -> ReservationResponse:
    return ReservationResponse.from_reservation(booking_service.get_reservation(reservation_id))


@router.delete("/{reservation_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_reservation(
    reservation_id: str,
    actor: Actor = Depends(get_current_actor),
    booking_service: BookingService = Depends(get_booking_service),
) -> Response:
    booking_service.delete(reservation_id, actor)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
