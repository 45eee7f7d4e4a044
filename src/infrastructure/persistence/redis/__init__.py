"""
Redis Infrastructure Module

Redis-based implementations of the matching repositories.

Exports:
    - RedisEdgeStore: Interest edges as hashes, WATCH/MULTI/EXEC writes
    - RedisUserDirectory: Known users as a set
    - get_redis_client: Get Redis client with connection pooling
    - health_check: Check Redis health with PING test
    - close_connections: Close all Redis connections
"""

from .connection import close_connections, get_redis_client, health_check
from .edge_store import RedisEdgeStore
from .user_directory import RedisUserDirectory

__all__ = [
    "RedisEdgeStore",
    "RedisUserDirectory",
    "get_redis_client",
    "health_check",
    "close_connections",
]
