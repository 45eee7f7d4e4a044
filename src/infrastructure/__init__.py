"""
Infrastructure Layer - External Dependencies

Implements technical capabilities that support the Domain Layer.

Architecture:
    - Implements Domain repository and service Protocols (Dependency Inversion)
    - Depends on external libraries (redis-py, Celery via injected tasks)
    - No Domain business logic (only technical implementations)

Modules:
    - persistence: in-memory and Redis edge stores / user directories
    - locking: in-process and Redis pair locks
    - events: in-memory and Celery match event publishers
    - candidates: directory-backed candidate feed

Usage:
    >>> from src.infrastructure import InMemoryEdgeStore, InProcessPairLock
    >>> from src.infrastructure.persistence.redis import RedisEdgeStore
"""

from .candidates import DirectoryCandidateSource
from .events import CeleryMatchEventPublisher, InMemoryMatchEventPublisher
from .locking import InProcessPairLock, RedisPairLock
from .persistence import (
    InMemoryEdgeStore,
    InMemoryUserDirectory,
    RedisEdgeStore,
    RedisUserDirectory,
)

__all__ = [
    "InMemoryEdgeStore",
    "InMemoryUserDirectory",
    "RedisEdgeStore",
    "RedisUserDirectory",
    "InProcessPairLock",
    "RedisPairLock",
    "InMemoryMatchEventPublisher",
    "CeleryMatchEventPublisher",
    "DirectoryCandidateSource",
]
