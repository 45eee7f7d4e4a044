"""
Event Publishing Infrastructure Module

Exports:
    - InMemoryMatchEventPublisher: records events in process memory
    - CeleryMatchEventPublisher: Redis dedup + Celery delivery task
"""

from .celery_publisher import CeleryMatchEventPublisher
from .in_memory_publisher import InMemoryMatchEventPublisher

__all__ = ["InMemoryMatchEventPublisher", "CeleryMatchEventPublisher"]
