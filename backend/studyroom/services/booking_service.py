# backend/studyroom/services/booking_service.py
"""
Booking Service (booking engine) for the study room service.

Validates and commits reservations:
1. Structural checks (hour range, non-empty participant identities)
2. Temporal checks (not in the past, not a Sunday) in local time
3. Participant resolution through the Student Registry
4. Slot availability
5. Per-student daily quota
6. Insert

Steps 3-6 run inside a keyed lock scope and a single transaction, so two
concurrent requests can neither double-book a slot nor push a student past
the daily cap between the check and the insert.
"""

from datetime import date, timedelta
import logging
from typing import Dict, List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from studyroom.core.booking_lock import booking_scope, quota_key, slot_key
from studyroom.core.clock import Clock, SystemClock, local_today
from studyroom.core.config import settings
from studyroom.core.constants import (
    DAYS_PER_BOOKING_WEEK,
    FIRST_START_HOUR,
    LAST_START_HOUR,
    SLOT_LENGTH_HOURS,
    SUNDAY,
)
from studyroom.core.exceptions import (
    DomainException,
    ForbiddenException,
    InvalidDateException,
    InvalidInputException,
    NotFoundException,
    QuotaExceededException,
    RepositoryException,
    SlotTakenException,
    StorageUnavailableException,
)
from studyroom.models.reservation import Reservation
from studyroom.models.student import Student
from studyroom.monitoring.prometheus_metrics import prometheus_metrics
from studyroom.principal import ANONYMOUS, Actor
from studyroom.repositories import RepositoryFactory
from studyroom.repositories.reservation_repository import ReservationRepository
from studyroom.repositories.room_repository import RoomRepository
from studyroom.schemas.reservation import ReservationCreate, StudentIdentity
from studyroom.services.availability_checker import AvailabilityChecker
from studyroom.services.base import BaseService
from studyroom.services.quota_accountant import QuotaAccountant
from studyroom.services.student_registry import StudentRegistry

logger = logging.getLogger(__name__)

Identity = Tuple[str, str]


class BookingService(BaseService):
    """
    Service layer for reservation creation, deletion and cleanup.

    Collaborators are injectable so tests can substitute repositories,
    the clock, or individual checks.
    """

    def __init__(
        self,
        db: Session,
        clock: Optional[Clock] = None,
        reservation_repository: Optional[ReservationRepository] = None,
        room_repository: Optional[RoomRepository] = None,
        student_registry: Optional[StudentRegistry] = None,
        availability_checker: Optional[AvailabilityChecker] = None,
        quota_accountant: Optional[QuotaAccountant] = None,
        max_daily_hours: Optional[int] = None,
    ):
        super().__init__(db)
        self.clock = clock or SystemClock()
        self.repository = (
            reservation_repository or RepositoryFactory.create_reservation_repository(db)
        )
        self.room_repository = room_repository or RepositoryFactory.create_room_repository(db)
        self.student_registry = student_registry or StudentRegistry(db)
        self.availability_checker = availability_checker or AvailabilityChecker(
            db, self.repository
        )
        self.quota_accountant = quota_accountant or QuotaAccountant(db, self.repository)
        self.max_daily_hours = (
            max_daily_hours if max_daily_hours is not None else settings.max_daily_hours_per_student
        )

    # Booking

    @BaseService.measure_operation("book")
    def book(self, request: ReservationCreate, actor: Actor = ANONYMOUS) -> Reservation:
        """
        Validate and commit a reservation.

        Args:
            request: Room, date, start hour and the two participants
            actor: Caller; becomes the owner unless anonymous

        Returns:
            The committed reservation with room and students loaded

        Raises:
            InvalidInputException, InvalidDateException, SlotTakenException,
            QuotaExceededException, BookingBusyException, StorageUnavailableException
        """
        try:
            reservation = self._book(request, actor)
        except DomainException as exc:
            prometheus_metrics.record_booking_outcome(exc.code)
            self.logger.info(
                f"Booking rejected: {exc.message}",
                extra={"code": exc.code, "room_id": request.room_id, "details": exc.details},
            )
            raise

        prometheus_metrics.record_booking_outcome("created")
        self.logger.info(
            "Reservation created",
            extra={
                "reservation_id": reservation.id,
                "room_id": reservation.room_id,
                "date": reservation.reservation_date.isoformat(),
                "start_hour": reservation.start_hour,
                "created_by": reservation.created_by,
            },
        )
        return reservation

    def _book(self, request: ReservationCreate, actor: Actor) -> Reservation:
        first, second = self._validate_structure(request)
        target_date = request.reservation_date
        self._validate_date(target_date)
        self._require_room(request.room_id)

        keys = [
            slot_key(request.room_id, target_date, request.start_hour),
            quota_key(target_date, *first),
            quota_key(target_date, *second),
        ]
        with booking_scope(keys):
            with self.transaction():
                student1 = self.student_registry.resolve(*first)
                student2 = self.student_registry.resolve(*second)

                if self.availability_checker.has_conflict(
                    request.room_id, target_date, request.start_hour
                ):
                    raise SlotTakenException(
                        request.room_id, target_date.isoformat(), request.start_hour
                    )

                self._check_quota(target_date, student1, student2)

                try:
                    reservation = self.repository.create(
                        room_id=request.room_id,
                        reservation_date=target_date,
                        start_hour=request.start_hour,
                        end_hour=request.start_hour + SLOT_LENGTH_HOURS,
                        student1_id=student1.id,
                        student2_id=student2.id,
                        created_by=actor.user_id,
                    )
                except IntegrityError as exc:
                    # Another process committed the same slot outside our lock scope
                    self.logger.warning("Unique slot constraint rejected insert: %s", exc)
                    raise SlotTakenException(
                        request.room_id, target_date.isoformat(), request.start_hour
                    ) from exc

        return reservation

    def _validate_structure(self, request: ReservationCreate) -> Tuple[Identity, Identity]:
        if not isinstance(request.start_hour, int) or not (
            FIRST_START_HOUR <= request.start_hour <= LAST_START_HOUR
        ):
            raise InvalidInputException(
                f"Reservations start between {FIRST_START_HOUR:02d}:00 and {LAST_START_HOUR:02d}:00",
                field="start_hour",
            )
        if not (request.room_id or "").strip():
            raise InvalidInputException("A room is required", field="room_id")
        return (
            self._normalize_identity(request.student1, "student1"),
            self._normalize_identity(request.student2, "student2"),
        )

    @staticmethod
    def _normalize_identity(identity: StudentIdentity, field: str) -> Identity:
        name = (identity.name or "").strip()
        class_identifier = (identity.class_identifier or "").strip()
        if not name:
            raise InvalidInputException(f"{field} name is required", field=f"{field}.name")
        if not class_identifier:
            raise InvalidInputException(f"{field} class is required", field=f"{field}.class")
        return name, class_identifier

    def _validate_date(self, target_date: date) -> None:
        today = local_today(self.clock)
        if target_date < today:
            raise InvalidDateException(
                "Reservations cannot be made for past dates",
                requested_date=target_date.isoformat(),
            )
        if target_date.weekday() == SUNDAY:
            raise InvalidDateException(
                "Reservations are not available on Sundays",
                requested_date=target_date.isoformat(),
            )

    def _require_room(self, room_id: str) -> None:
        try:
            room = self.room_repository.get_by_id(room_id, load_relationships=False)
        except RepositoryException as exc:
            raise StorageUnavailableException() from exc
        if room is None:
            raise InvalidInputException(f"Unknown room: {room_id}", field="room_id")

    def _check_quota(self, target_date: date, *students: Student) -> None:
        seen = set()
        for student in students:
            if student.id in seen:
                continue
            seen.add(student.id)
            hours = self.quota_accountant.hours_booked(student.id, target_date)
            if hours + SLOT_LENGTH_HOURS > self.max_daily_hours:
                raise QuotaExceededException(
                    student.name, student.class_identifier, hours, self.max_daily_hours
                )

    # Reads

    @BaseService.measure_operation("get_reservations")
    def get_reservations(self, target_date: date) -> List[Reservation]:
        """Reservations on one calendar day with room and students loaded."""
        try:
            return self.repository.get_for_date(target_date, load_relationships=True)
        except RepositoryException as exc:
            raise StorageUnavailableException() from exc

    @BaseService.measure_operation("get_reservations_week")
    def get_reservations_for_week(self, start_date: date) -> Dict[str, List[Reservation]]:
        """
        Reservations for the six bookable days starting at ``start_date``,
        keyed by ISO date. Days without reservations map to empty lists.
        """
        end_date = start_date + timedelta(days=DAYS_PER_BOOKING_WEEK - 1)
        try:
            reservations = self.repository.get_between(start_date, end_date)
        except RepositoryException as exc:
            raise StorageUnavailableException() from exc

        by_date: Dict[str, List[Reservation]] = {
            (start_date + timedelta(days=offset)).isoformat(): []
            for offset in range(DAYS_PER_BOOKING_WEEK)
        }
        for reservation in reservations:
            by_date.setdefault(reservation.reservation_date.isoformat(), []).append(reservation)
        return by_date

    def get_reservation(self, reservation_id: str) -> Reservation:
        try:
            reservation = self.repository.get_by_id(reservation_id)
        except RepositoryException as exc:
            raise StorageUnavailableException() from exc
        if reservation is None:
            raise NotFoundException(
                "Reservation not found", details={"reservation_id": reservation_id}
            )
        return reservation

    # Deletion

    @BaseService.measure_operation("delete")
    def delete(self, reservation_id: str, actor: Actor) -> None:
        """
        Delete a reservation if ``actor`` is its creator or an admin.

        Raises:
            NotFoundException: no reservation with this id
            ForbiddenException: actor is neither creator nor admin
        """
        with self.transaction():
            reservation = self.repository.get_by_id(reservation_id, load_relationships=False)
            if reservation is None:
                raise NotFoundException(
                    "Reservation not found", details={"reservation_id": reservation_id}
                )
            if not actor.can_delete(reservation.created_by):
                self.logger.warning(
                    "Deletion refused",
                    extra={"reservation_id": reservation_id, "actor": actor.user_id},
                )
                raise ForbiddenException(
                    "Only the creator or an administrator can delete this reservation",
                    details={"reservation_id": reservation_id},
                )
            self.repository.delete(reservation_id)

        prometheus_metrics.record_reservations_deleted("user", 1)
        self.logger.info(
            "Reservation deleted",
            extra={
                "reservation_id": reservation_id,
                "actor": actor.user_id,
                "admin": actor.is_admin,
            },
        )

    # Maintenance

    @BaseService.measure_operation("purge_older_than")
    def purge_older_than(self, days: int) -> Tuple[int, date]:
        """
        Delete reservations dated strictly before (today - days).

        Returns:
            (deleted row count, cutoff date)
        """
        if days < 0:
            raise InvalidInputException("Retention window must not be negative", field="days")
        cutoff = local_today(self.clock) - timedelta(days=days)
        with self.transaction():
            deleted = self.repository.delete_before(cutoff)

        prometheus_metrics.record_reservations_deleted("purge", deleted)
        self.logger.info(f"Purged {deleted} reservations dated before {cutoff.isoformat()}")
        return deleted, cutoff
