"""Celery worker and beat tasks for reservation maintenance."""
