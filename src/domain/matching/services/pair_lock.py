"""
PairLock Protocol

Pair-level mutual exclusion for MatchEngine.

Responsibility:
    - Serialize state-changing operations on the same unordered pair
    - Never block operations on different pairs
    - Bound the wait: a caller that cannot acquire the lock in time gets
      LockAcquisitionTimeoutError and writes nothing

Architecture Notes:
    - Domain Service interface (Protocol)
    - Implementations: InProcessPairLock (threading, single process),
      RedisPairLock (redis-py Lock, many processes / hosts)
    - The lock is held only for the short read-modify-write sequence;
      MatchEngine never calls the publisher while holding it
"""

from contextlib import AbstractContextManager
from typing import Protocol

from src.domain.matching.value_objects.pair_key import PairKey


class PairLockProtocol(Protocol):
    """
    Protocol for pair-scoped critical sections.

    Usage:
        >>> with pair_lock.hold(PairKey.of("alice", "bob")):
        ...     ...  # read and write both edges of the pair

    Raises (from hold):
        LockAcquisitionTimeoutError: If the lock was not acquired in time
        TransientStoreError: If the lock backend is unavailable
    """

    def hold(self, pair_key: PairKey) -> AbstractContextManager[None]:
        """Acquire the lock for pair_key for the duration of the with-block."""
        ...
