"""
Celery Tasks

Responsibility:
    Asynchronous delivery of match notifications.

Contains:
    - celery_app.py - Celery configuration and health_check task
    - notification_tasks.py - deliver_match_event

Does NOT contain:
    - Business logic (match formation lives in MatchEngine)
"""

from .celery_app import celery_app, health_check
from .notification_tasks import deliver_match_event

__all__ = ["celery_app", "health_check", "deliver_match_event"]
