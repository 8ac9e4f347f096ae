# backend/studyroom/core/exceptions.py
"""
Booking-domain errors.

Each exception carries a stable ``code`` and its HTTP status; the API layer
renders them through errors.register_error_handlers.
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status

HTTP_422_UNPROCESSABLE: int = getattr(status, "HTTP_422_UNPROCESSABLE_CONTENT", 422)


class DomainException(Exception):
    """Root of every error the booking engine reports to callers."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": self.message,
                "code": self.code,
                "details": self.details,
            },
        )


class ValidationException(DomainException):
    """Rejected request data (400)."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundException(DomainException):
    """No row with the requested id (404)."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, code="NOT_FOUND", details=details)


class ConflictException(DomainException):
    """Request collides with current state (409)."""

    status_code = status.HTTP_409_CONFLICT


class BusinessRuleException(DomainException):
    """Well-formed request refused by a booking rule (422)."""

    status_code = HTTP_422_UNPROCESSABLE


class ForbiddenException(DomainException):
    """Raised when the actor lacks permission for an action."""

    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, code="FORBIDDEN", details=details)


class ServiceException(DomainException):
    """Unexpected storage or service failure (500)."""


# Specific business exceptions


class InvalidInputException(ValidationException):
    """Malformed or missing booking fields (empty name, out-of-range hour)."""

    def __init__(self, message: str, *, field: Optional[str] = None) -> None:
        super().__init__(
            message=message,
            code="INVALID_INPUT",
            details={"field": field} if field else {},
        )


class InvalidDateException(ValidationException):
    """Raised for past dates and Sundays."""

    def __init__(self, message: str, *, requested_date: str) -> None:
        super().__init__(
            message=message,
            code="INVALID_DATE",
            details={"date": requested_date},
        )


class SlotTakenException(ConflictException):
    """Raised when the (room, date, hour) slot already has a reservation."""

    def __init__(self, room_id: str, requested_date: str, start_hour: int) -> None:
        super().__init__(
            message="This time slot is already reserved",
            code="SLOT_TAKEN",
            details={
                "room_id": room_id,
                "date": requested_date,
                "start_hour": start_hour,
            },
        )


class QuotaExceededException(BusinessRuleException):
    """Raised when a student has already used the daily hour allowance."""

    def __init__(
        self,
        student_name: str,
        class_identifier: str,
        hours_booked: int,
        max_hours: int,
    ) -> None:
        super().__init__(
            message=f"{student_name} has already reserved {hours_booked} of {max_hours} hours for this day",
            code="QUOTA_EXCEEDED",
            details={
                "student_name": student_name,
                "class_identifier": class_identifier,
                "hours_booked": hours_booked,
                "max_hours": max_hours,
            },
        )


class BookingBusyException(ConflictException):
    """Raised when a booking scope cannot be entered before the lock timeout."""

    def __init__(self, keys: list[str]) -> None:
        super().__init__(
            message="Another booking for this slot is in progress. Please retry.",
            code="BOOKING_BUSY",
            details={"keys": keys},
        )


class StorageUnavailableException(ServiceException):
    """Raised when the reservation store cannot be reached."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    def __init__(self, message: str = "Reservation storage is unavailable") -> None:
        super().__init__(message=message, code="STORAGE_UNAVAILABLE")

    def to_http_exception(self) -> HTTPException:
        exc = super().to_http_exception()
        exc.headers = {"Retry-After": "2"}
        return exc


class RepositoryException(Exception):
    """
    Exception raised for repository layer errors.

    This exception is used when data access operations fail,
    such as database connection issues, query failures, or
    constraint violations.
    """
