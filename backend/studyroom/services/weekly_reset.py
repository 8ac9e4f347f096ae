# backend/studyroom/services/weekly_reset.py
"""
Weekly Reset Scheduler.

Wipes every reservation at Sunday 00:00 local time, every week, for the
lifetime of the process. One asyncio task owned by the application lifespan
runs the loop: compute the delay, sleep, delete, re-arm. A failed delete is
logged and the loop re-arms anyway.

The clock and the sleep function are injectable so tests can drive the loop
with virtual time.
"""

from __future__ import annotations

import asyncio
from datetime import datetime
import logging
from typing import Awaitable, Callable, Optional

from studyroom.core.clock import Clock, SystemClock, next_sunday_midnight
from studyroom.database import get_db_session
from studyroom.monitoring.prometheus_metrics import prometheus_metrics
from studyroom.repositories import RepositoryFactory

logger = logging.getLogger(__name__)

ResetCallable = Callable[[], int]
SleepCallable = Callable[[float], Awaitable[None]]


def delete_all_reservations() -> int:
    """Unconditionally delete every reservation. Returns the row count."""
    with get_db_session() as db:
        return RepositoryFactory.create_reservation_repository(db).delete_all()


class WeeklyResetScheduler:
    """
    Single-task recurring full reset.

    Usage:
        scheduler = WeeklyResetScheduler(delete_all_reservations)
        scheduler.start()        # at startup, inside the running loop
        await scheduler.stop()   # at shutdown
    """

    def __init__(
        self,
        reset: ResetCallable = delete_all_reservations,
        clock: Optional[Clock] = None,
        sleep: SleepCallable = asyncio.sleep,
    ) -> None:
        self._reset = reset
        self._clock = clock or SystemClock()
        self._sleep = sleep
        self._task: Optional[asyncio.Task[None]] = None
        self._last_target: Optional[datetime] = None
        self.runs = 0
        self.failures = 0

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def last_target(self) -> Optional[datetime]:
        return self._last_target

    def next_reset_at(self) -> datetime:
        """
        Next Sunday 00:00 local time strictly after now and after the
        boundary that last fired.
        """
        reference = self._clock.now()
        # An early wake-up must not target the boundary that just fired
        if self._last_target is not None and self._last_target >= reference:
            reference = self._last_target
        return next_sunday_midnight(reference, self._clock.tz)

    def seconds_until_next_reset(self) -> float:
        target = self.next_reset_at()
        return max((target - self._clock.now()).total_seconds(), 0.0)

    async def run_cycle(self) -> None:
        """Wait for the next boundary, then perform one reset."""
        target = self.next_reset_at()
        delay = max((target - self._clock.now()).total_seconds(), 0.0)
        logger.info(
            f"[Scheduler] Next weekly reset scheduled in {round(delay / 60)} minutes",
            extra={"target": target.isoformat(), "delay_seconds": delay},
        )
        await self._sleep(delay)
        self._last_target = target
        await self._fire()

    async def _fire(self) -> None:
        self.runs += 1
        try:
            deleted = await asyncio.to_thread(self._reset)
        except Exception:
            self.failures += 1
            prometheus_metrics.record_weekly_reset("error")
            logger.exception("[Scheduler] Failed to delete reservations")
            return
        prometheus_metrics.record_weekly_reset("success")
        prometheus_metrics.record_reservations_deleted("weekly_reset", deleted or 0)
        logger.info(
            f"[Scheduler] Weekly reset completed at {self._clock.now().isoformat()}",
            extra={"deleted": deleted},
        )

    async def run(self) -> None:
        """Re-arm forever."""
        while True:
            await self.run_cycle()

    def start(self) -> asyncio.Task[None]:
        """Start the loop on the running event loop. Idempotent."""
        if self._task is not None and not self._task.done():
            return self._task
        self._task = asyncio.create_task(self.run(), name="weekly-reservation-reset")
        logger.info("[Scheduler] Weekly reset scheduler started")
        return self._task

    async def stop(self) -> None:
        task = self._task
        self._task = None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("[Scheduler] Weekly reset scheduler stopped")
