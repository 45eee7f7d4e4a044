"""
Celery application initialization.

Broker and result backend are Redis. Workers run the match notification
delivery task (notification_tasks.deliver_match_event).

Architecture Note:
- Part of Application Layer (orchestration)
- Uses environment variables for configuration (.env loaded via python-dotenv)
- No business logic - pure infrastructure setup
"""

import os
from datetime import datetime, timezone

from celery import Celery
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

celery_app = Celery(
    "swipematch",
    broker=os.environ.get("CELERY_BROKER_URL", "redis://localhost:6379/0"),
    backend=os.environ.get("CELERY_RESULT_BACKEND", "redis://localhost:6379/1"),
)

celery_app.conf.update(
    task_track_started=True,
    task_time_limit=60,  # delivery is a single XADD
    task_acks_late=True,  # redeliver if a worker dies mid-task
    result_expires=3600,
)

celery_app.autodiscover_tasks(["src.application.tasks"], related_name="notification_tasks")


@celery_app.task(name="health_check")
def health_check() -> dict:
    """
    Simple health check task to verify Celery-Redis connection.

    Returns:
        dict: status, message, timestamp (ISO) and worker hostname

    Example:
        >>> health_check.delay().get(timeout=5)["status"]
        'ok'
    """
    return {
        "status": "ok",
        "message": "Celery worker is healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "worker": (
            celery_app.current_task.request.hostname
            if celery_app.current_task
            else "unknown"
        ),
    }
