# backend/studyroom/tasks/reservation_maintenance.py
"""
Periodic reservation maintenance.

Removes reservations dated before the retention window so the table only
holds the current and recent weeks.
"""

import logging
from typing import Any, Callable, Dict, Optional, TypeVar, cast

from celery import shared_task

from studyroom.core.config import settings
from studyroom.database import get_db_session
from studyroom.services.booking_service import BookingService

logger = logging.getLogger(__name__)

_TaskFunc = TypeVar("_TaskFunc", bound=Callable[..., Any])


def _typed_shared_task(*args: Any, **kwargs: Any) -> Callable[[_TaskFunc], _TaskFunc]:
    """Typed wrapper for Celery's shared_task decorator."""
    return cast(Callable[[_TaskFunc], _TaskFunc], shared_task(*args, **kwargs))


@_typed_shared_task(
    name="reservations.cleanup_old_reservations",
    autoretry_for=(Exception,),
    retry_kwargs={"max_retries": 3, "countdown": 60},
)
def cleanup_old_reservations(days: Optional[int] = None) -> Dict[str, Any]:
    """Delete reservations dated before today minus ``days`` (default: retention_days)."""
    retention = settings.retention_days if days is None else days
    with get_db_session() as db:
        deleted, cutoff = BookingService(db).purge_older_than(retention)

    logger.info(
        "[RESERVATIONS] Cleanup removed %s reservations before %s",
        deleted,
        cutoff.isoformat(),
    )
    return {"status": "success", "deleted": deleted, "cutoff_date": cutoff.isoformat()}
