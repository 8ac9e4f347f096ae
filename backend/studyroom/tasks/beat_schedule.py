# backend/studyroom/tasks/beat_schedule.py
"""
Celery Beat schedule.

Tasks are scheduled using crontab expressions in the configured local
timezone (see celery_app.create_celery_app).
"""

from celery.schedules import crontab

from studyroom.core.config import settings

CELERYBEAT_SCHEDULE = {
    # Purge reservations older than the retention window - daily at 3:00 AM
    "cleanup-old-reservations": {
        "task": "reservations.cleanup_old_reservations",
        "schedule": crontab(hour=3, minute=0),
        "args": (settings.retention_days,),
        "options": {"queue": "maintenance", "expires": 3600},
    },
}
