"""
Persistence Infrastructure Module

Edge store and user directory implementations.

Exports:
    From in_memory:
        - InMemoryEdgeStore, InMemoryUserDirectory

    From redis:
        - RedisEdgeStore, RedisUserDirectory
"""

from .in_memory import InMemoryEdgeStore, InMemoryUserDirectory
from .redis import RedisEdgeStore, RedisUserDirectory

__all__ = [
    "InMemoryEdgeStore",
    "InMemoryUserDirectory",
    "RedisEdgeStore",
    "RedisUserDirectory",
]
