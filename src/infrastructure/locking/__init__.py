"""
Locking Infrastructure Module

Pair-level mutual exclusion for MatchEngine.

Exports:
    - InProcessPairLock: threading-based, single process
    - RedisPairLock: redis-py Lock, shared across processes
"""

from .in_process_pair_lock import InProcessPairLock
from .redis_pair_lock import RedisPairLock

__all__ = ["InProcessPairLock", "RedisPairLock"]
