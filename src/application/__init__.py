"""
Application Layer Package

Responsibility:
    Coordinates use cases between API and Domain, implements the CQRS split
    and hosts the Celery tasks for match notifications.

Contains:
    - commands/: CQRS write operations (RecordSwipeCommand)
    - queries/: CQRS read operations (connections, pair status, candidates)
    - services/: Use Cases (RecordSwipeUseCase)
    - tasks/: Celery app and notification delivery task
    - models: Shared Application Layer models

Does NOT contain:
    - Domain business rules (in Domain Layer)
    - HTTP handling (in API Layer)
    - Infrastructure details (in Infrastructure Layer)
"""

from src.application.models import SwipeDirection

__all__ = [
    "SwipeDirection",
]
