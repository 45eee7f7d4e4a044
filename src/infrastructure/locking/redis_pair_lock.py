"""
Redis Pair Lock

Pair-level mutual exclusion across processes and hosts, built on the
redis-py Lock (SET NX PX with a random token, Lua-checked release).

Business Rules:
    - Lock key: "lock:pair:{low}|{high}"
    - The lock expires after ttl_seconds so a crashed holder cannot block
      the pair forever. If it expires mid-section, the version-checked
      store writes catch the overlap and MatchEngine retries
    - Waiting is bounded by wait_timeout_seconds

Error Handling:
    - Not acquired in time -> LockAcquisitionTimeoutError
    - RedisError while acquiring -> TransientStoreError
    - Release failure (expired or lost token) -> logged warning; the
      critical section already finished
"""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from redis import Redis
from redis.exceptions import LockError, RedisError

from src.domain.matching.matching_config import (
    DEFAULT_LOCK_TTL_SECONDS,
    DEFAULT_LOCK_WAIT_TIMEOUT_SECONDS,
)
from src.domain.matching.value_objects.pair_key import PairKey
from src.domain.shared.exceptions import (
    LockAcquisitionTimeoutError,
    TransientStoreError,
)
from src.infrastructure.persistence.redis.connection import get_redis_client

logger = logging.getLogger(__name__)


class RedisPairLock:
    """
    PairLockProtocol implementation on a shared Redis.

    Examples:
        >>> locks = RedisPairLock(ttl_seconds=10, wait_timeout_seconds=5)
        >>> with locks.hold(PairKey.of("alice", "bob")):
        ...     ...  # read-modify-write both edges
    """

    def __init__(
        self,
        redis_client: Optional[Redis] = None,
        ttl_seconds: float = DEFAULT_LOCK_TTL_SECONDS,
        wait_timeout_seconds: float = DEFAULT_LOCK_WAIT_TIMEOUT_SECONDS,
        key_prefix: str = "",
    ) -> None:
        self.redis: Redis = redis_client if redis_client is not None else get_redis_client()
        self.ttl_seconds = ttl_seconds
        self.wait_timeout_seconds = wait_timeout_seconds
        self.key_prefix = key_prefix

    def _get_lock_key(self, pair_key: PairKey) -> str:
        """
        Examples:
            >>> locks._get_lock_key(PairKey.of("bob", "alice"))
            'lock:pair:alice|bob'
        """
        key = f"lock:pair:{pair_key}"
        return f"{self.key_prefix}:{key}" if self.key_prefix else key

    @contextmanager
    def hold(self, pair_key: PairKey) -> Iterator[None]:
        name = self._get_lock_key(pair_key)
        lock = self.redis.lock(
            name,
            timeout=self.ttl_seconds,
            blocking_timeout=self.wait_timeout_seconds,
        )

        try:
            acquired = lock.acquire()
        except RedisError as e:
            raise TransientStoreError(
                "Failed to acquire pair lock", operation="acquire_pair_lock", original_error=e
            ) from e

        if not acquired:
            raise LockAcquisitionTimeoutError(str(pair_key), self.wait_timeout_seconds)

        logger.debug(f"Redis pair lock acquired: {name}")
        try:
            yield
        finally:
            try:
                lock.release()
            except LockError as e:
                logger.warning(f"Pair lock {name} expired before release: {e}")
            except RedisError as e:
                logger.warning(f"Failed to release pair lock {name}: {e}")
