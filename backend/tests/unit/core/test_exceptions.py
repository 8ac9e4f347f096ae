"""Domain exceptions carry stable codes and HTTP statuses."""

import pytest

from studyroom.core.exceptions import (
    BookingBusyException,
    ForbiddenException,
    InvalidDateException,
    InvalidInputException,
    NotFoundException,
    QuotaExceededException,
    SlotTakenException,
    StorageUnavailableException,
)

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    "exc, status, code",
    [
        (InvalidInputException("bad", field="start_hour"), 400, "INVALID_INPUT"),
        (InvalidDateException("sunday", requested_date="2026-02-22"), 400, "INVALID_DATE"),
        (SlotTakenException("R1", "2026-02-16", 10), 409, "SLOT_TAKEN"),
        (QuotaExceededException("Hong", "1", 2, 2), 422, "QUOTA_EXCEEDED"),
        (NotFoundException("missing"), 404, "NOT_FOUND"),
        (ForbiddenException("nope"), 403, "FORBIDDEN"),
        (StorageUnavailableException(), 503, "STORAGE_UNAVAILABLE"),
        (BookingBusyException(["slot:a"]), 409, "BOOKING_BUSY"),
    ],
)
def test_status_and_code(exc, status, code):
    http_exc = exc.to_http_exception()
    assert exc.code == code
    assert http_exc.status_code == status
    assert http_exc.detail["code"] == code
    assert http_exc.detail["message"] == exc.message


def test_slot_taken_details():
    exc = SlotTakenException("R1", "2026-02-16", 10)
    assert exc.details == {"room_id": "R1", "date": "2026-02-16", "start_hour": 10}


def test_quota_exceeded_message_names_student():
    exc = QuotaExceededException("Hong", "1", 2, 2)
    assert "Hong" in exc.message
    assert exc.details["hours_booked"] == 2
    assert exc.details["max_hours"] == 2


def test_invalid_input_without_field_has_empty_details():
    assert InvalidInputException("bad").details == {}


def test_storage_unavailable_sets_retry_after():
    assert StorageUnavailableException().to_http_exception().headers == {"Retry-After": "2"}
