"""
Tests for InProcessPairLock.

Covers:
- Mutual exclusion per unordered pair
- Independent pairs do not block each other
- Bounded wait -> LockAcquisitionTimeoutError
- Registry cleanup after release and after exceptions
"""

import threading

import pytest

from src.domain.matching.value_objects import PairKey
from src.domain.shared.exceptions import LockAcquisitionTimeoutError
from src.infrastructure.locking import InProcessPairLock


def _hold_in_thread(locks: InProcessPairLock, key: PairKey):
    """Hold key in a background thread until the returned event is set."""
    acquired = threading.Event()
    release = threading.Event()

    def holder():
        with locks.hold(key):
            acquired.set()
            release.wait(timeout=5)

    thread = threading.Thread(target=holder)
    thread.start()
    assert acquired.wait(timeout=5)
    return release, thread


def test_hold_and_release_cleans_registry():
    locks = InProcessPairLock(wait_timeout_seconds=1.0)

    with locks.hold(PairKey.of("alice", "bob")):
        assert locks.active_keys() == ["alice|bob"]

    assert locks.active_keys() == []


def test_same_pair_in_either_direction_is_exclusive():
    locks = InProcessPairLock(wait_timeout_seconds=0.05)
    release, thread = _hold_in_thread(locks, PairKey.of("alice", "bob"))

    try:
        with pytest.raises(LockAcquisitionTimeoutError) as exc_info:
            with locks.hold(PairKey.of("bob", "alice")):
                pass
        assert exc_info.value.pair_key == "alice|bob"
        assert exc_info.value.timeout_seconds == 0.05
    finally:
        release.set()
        thread.join(timeout=5)

    assert locks.active_keys() == []


def test_other_pairs_are_not_blocked():
    locks = InProcessPairLock(wait_timeout_seconds=0.05)
    release, thread = _hold_in_thread(locks, PairKey.of("alice", "bob"))

    try:
        with locks.hold(PairKey.of("alice", "carol")):
            assert sorted(locks.active_keys()) == ["alice|bob", "alice|carol"]
    finally:
        release.set()
        thread.join(timeout=5)


def test_waiter_acquires_after_release():
    locks = InProcessPairLock(wait_timeout_seconds=5.0)
    release, thread = _hold_in_thread(locks, PairKey.of("alice", "bob"))
    threading.Timer(0.05, release.set).start()

    with locks.hold(PairKey.of("alice", "bob")):
        pass

    thread.join(timeout=5)
    assert locks.active_keys() == []


def test_lock_released_when_body_raises():
    locks = InProcessPairLock(wait_timeout_seconds=0.05)

    with pytest.raises(RuntimeError):
        with locks.hold(PairKey.of("alice", "bob")):
            raise RuntimeError("boom")

    with locks.hold(PairKey.of("alice", "bob")):
        pass
    assert locks.active_keys() == []
