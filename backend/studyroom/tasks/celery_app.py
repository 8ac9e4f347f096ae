# backend/studyroom/tasks/celery_app.py
"""
Celery application configuration for the study room service.

Redis is the broker. The only periodic work is the daily purge of stale
reservations; the weekly full reset runs inside the API process.
"""

import os
from typing import Any

from celery import Celery
from celery.signals import setup_logging

from studyroom.core.config import settings


def create_celery_app() -> Celery:
    """
    Create and configure the Celery application.

    Returns:
        Celery: Configured Celery application instance
    """
    # Priority: CELERY_BROKER_URL -> settings.redis_url -> default
    broker_url = (
        os.getenv("CELERY_BROKER_URL") or settings.redis_url or "redis://localhost:6379/0"
    )

    celery_app = Celery("studyroom", broker=broker_url)

    celery_app.conf.update(
        {
            "task_serializer": "json",
            "accept_content": ["json"],
            "result_serializer": "json",
            # Beat crontabs are evaluated in the same local time as the booking rules
            "timezone": settings.timezone,
            "enable_utc": True,
            "task_ignore_result": True,
            "task_acks_late": True,
            "task_reject_on_worker_lost": True,
            "task_soft_time_limit": 120,
            "task_time_limit": 300,
            "worker_hijack_root_logger": False,
            "beat_schedule_filename": "celerybeat-schedule",
        }
    )

    celery_app.conf.imports = ("studyroom.tasks.reservation_maintenance",)
    celery_app.conf.task_routes = {
        "reservations.*": {"queue": "maintenance"},
    }

    from studyroom.tasks.beat_schedule import CELERYBEAT_SCHEDULE

    celery_app.conf.beat_schedule = CELERYBEAT_SCHEDULE

    return celery_app


# Disable Celery's default logging configuration
@setup_logging.connect  # type: ignore[misc]
def config_loggers(*args: Any, **kwargs: Any) -> None:
    """Configure logging to integrate with the application's logging setup."""
    import logging

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


celery_app = create_celery_app()
