"""
In-Process Pair Lock

Pair-level mutual exclusion for engines sharing one Python process.

Architecture Notes:
    - One threading.Lock per active pair key, created on demand
    - Reference counted: the entry is dropped once no thread holds or waits
      for it, so the registry only grows with concurrently contended pairs
    - Waits are bounded; a timed-out caller gets LockAcquisitionTimeoutError
"""

import logging
import threading
from contextlib import contextmanager
from typing import Iterator

from src.domain.matching.matching_config import DEFAULT_LOCK_WAIT_TIMEOUT_SECONDS
from src.domain.matching.value_objects.pair_key import PairKey
from src.domain.shared.exceptions import LockAcquisitionTimeoutError

logger = logging.getLogger(__name__)


class _LockEntry:
    __slots__ = ("lock", "refs")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.refs = 0


class InProcessPairLock:
    """
    PairLockProtocol implementation on threading primitives.

    Examples:
        >>> locks = InProcessPairLock(wait_timeout_seconds=1.0)
        >>> with locks.hold(PairKey.of("alice", "bob")):
        ...     pass
        >>> locks.active_keys()
        []
    """

    def __init__(self, wait_timeout_seconds: float = DEFAULT_LOCK_WAIT_TIMEOUT_SECONDS) -> None:
        self.wait_timeout_seconds = wait_timeout_seconds
        self._entries: dict[str, _LockEntry] = {}
        self._registry_lock = threading.Lock()

    @contextmanager
    def hold(self, pair_key: PairKey) -> Iterator[None]:
        key = str(pair_key)
        entry = self._checkout(key)
        try:
            if not entry.lock.acquire(timeout=self.wait_timeout_seconds):
                raise LockAcquisitionTimeoutError(key, self.wait_timeout_seconds)
            logger.debug(f"Pair lock acquired: {key}")
            try:
                yield
            finally:
                entry.lock.release()
                logger.debug(f"Pair lock released: {key}")
        finally:
            self._checkin(key, entry)

    def active_keys(self) -> list[str]:
        """Pair keys currently held or waited for."""
        with self._registry_lock:
            return sorted(self._entries)

    def _checkout(self, key: str) -> _LockEntry:
        with self._registry_lock:
            entry = self._entries.get(key)
            if entry is None:
                entry = self._entries[key] = _LockEntry()
            entry.refs += 1
            return entry

    def _checkin(self, key: str, entry: _LockEntry) -> None:
        with self._registry_lock:
            entry.refs -= 1
            if entry.refs == 0:
                del self._entries[key]
