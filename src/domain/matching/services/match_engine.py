"""
MatchEngine - Domain Service

Sole authority for interest outcomes and match formation.

Responsibility:
    - Record interest (pending edge) and disinterest (rejected edge)
    - Promote two opposing pending edges to connected exactly once
    - Apply the re-swipe policy to interest on a rejected edge
    - Notify the EventPublisher once per formed match

Architecture Notes:
    - Pure domain service; storage, locking and publishing are injected
      through Protocols (EdgeStore, PairLock, EventPublisher, UserDirectory)
    - Stateless between calls: many engine instances may share one store
    - Synchronous and thread-safe; Application Layer runs it in worker
      threads so concurrent requests map onto concurrent calls here

Concurrency Protocol:
    1. Every state-changing operation holds the pair lock for PairKey(from, to)
       during its read-modify-write sequence only
    2. Interest is decided on one consistent read of both edges and written
       by a single store commit checked against that read: the own edge is
       created or reopened, and a pending reciprocal is connected, together
       or not at all. A failed call leaves the pair as it found it
    3. Store writes are version-checked; a lost commit (lock expired, or a
       writer that bypassed the engine) restarts the operation from the
       top after an exponential backoff, bounded by config.max_attempts
    4. The read-then-decide steps are idempotent, so a restarted operation
       converges on the state the winner committed
    5. The publisher is called after the lock is released, only by the call
       whose commit connected the pair

Outcomes:
    record_interest    -> NEW | MATCHED | ALREADY_MATCHED
    record_disinterest -> REJECTED | ALREADY_MATCHED
"""

import logging
import math
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Optional

from src.domain.shared.exceptions import (
    ConflictExhaustedError,
    LockAcquisitionTimeoutError,
    ReswipeCooldownError,
    ReswipeForbiddenError,
    TransientStoreError,
    UnknownUserError,
)
from src.domain.matching.entities.interest_edge import InterestEdge, utc_now
from src.domain.matching.matching_config import MatchingConfig, ReswipePolicy
from src.domain.matching.repositories.edge_store import EdgeStoreProtocol
from src.domain.matching.repositories.user_directory import UserDirectoryProtocol
from src.domain.matching.services.event_publisher import EventPublisherProtocol
from src.domain.matching.services.pair_lock import PairLockProtocol
from src.domain.matching.value_objects.edge_status import EdgeStatus
from src.domain.matching.value_objects.pair_key import PairKey
from src.domain.matching.value_objects.swipe_result import (
    CommitResult,
    SwipeOutcome,
    SwipeResult,
)

logger = logging.getLogger(__name__)


class _WriteConflict(Exception):
    """A version-checked write lost against a concurrent writer; restart the operation."""


@dataclass
class MatchEngine:
    """
    Domain service recording swipes and forming matches.

    Attributes:
        edge_store: Durable edge storage with atomic conditional writes
        pair_lock: Pair-level mutual exclusion
        publisher: Receives one notification per formed match
        config: Re-swipe policy, lock wait and retry budget
        user_directory: Optional membership check (UnknownUserError when set)
        clock: Source of "now" (UTC), injectable for cooldown tests
        sleep: Backoff sleep, injectable so retry tests run instantly

    Usage:
        >>> engine = MatchEngine(
        ...     edge_store=InMemoryEdgeStore(),
        ...     pair_lock=InProcessPairLock(),
        ...     publisher=InMemoryMatchEventPublisher(),
        ... )
        >>> engine.record_interest("alice", "bob").outcome
        <SwipeOutcome.NEW: 'new'>
        >>> engine.record_interest("bob", "alice").outcome
        <SwipeOutcome.MATCHED: 'matched'>
    """

    edge_store: EdgeStoreProtocol
    pair_lock: PairLockProtocol
    publisher: EventPublisherProtocol
    config: MatchingConfig = field(default_factory=MatchingConfig.default)
    user_directory: Optional[UserDirectoryProtocol] = None
    clock: Callable[[], datetime] = utc_now
    sleep: Callable[[float], None] = time.sleep

    # ========================================================================
    # PUBLIC OPERATIONS
    # ========================================================================

    def record_interest(self, from_user: str, to_user: str) -> SwipeResult:
        """
        Record that from_user is interested in to_user.

        Algorithm:
            1. Read both edges of the pair in one snapshot
               - own CONNECTED: ALREADY_MATCHED, nothing written
               - own PENDING: idempotent repeat (NEW, or connect a pair
                 left with two pending edges)
               - own REJECTED: re-swipe policy decides (error or reopen)
            2. Commit against the snapshot: create or reopen (from -> to);
               if (to -> from) is PENDING, both become CONNECTED in the same
               write -> MATCHED, otherwise -> NEW
            3. Snapshot outdated at commit time: restart from step 1

        Args:
            from_user: Acting user
            to_user: Target user

        Returns:
            SwipeResult with outcome NEW, MATCHED or ALREADY_MATCHED

        Raises:
            InvalidUserIdError / InvalidUserPairError / UnknownUserError: validation
            ReswipeForbiddenError / ReswipeCooldownError: re-swipe policy
            LockAcquisitionTimeoutError: pair lock not acquired in time
            ConflictExhaustedError: retry budget exhausted by write conflicts
            TransientStoreError: store unavailable on every attempt
        """
        pair = self._validate(from_user, to_user)

        result, attempts = self._run_locked(
            pair,
            "record_interest",
            lambda: self._interest_step(from_user, to_user),
        )

        dispatched = False
        if result.outcome is SwipeOutcome.MATCHED:
            logger.info(f"Match formed: {pair} (attempts={attempts})")
            dispatched = self._dispatch_match(pair)
        else:
            logger.info(
                f"Interest recorded: {from_user}->{to_user} "
                f"outcome={result.outcome.value} repeated={result.repeated}"
            )

        return result.model_copy(
            update={"attempts": attempts, "notification_dispatched": dispatched}
        )

    def record_disinterest(self, from_user: str, to_user: str) -> SwipeResult:
        """
        Record that from_user is not interested in to_user.

        Business Rules:
            - Creates or overwrites (from -> to) with REJECTED
            - Never reads or alters the reciprocal edge, never forms a match
            - Repeating it is a no-op (REJECTED, repeated=True)
            - An already CONNECTED edge is left untouched (ALREADY_MATCHED);
              unmatching is not an engine operation

        Returns:
            SwipeResult with outcome REJECTED or ALREADY_MATCHED

        Raises:
            Same validation and transient errors as record_interest
        """
        pair = self._validate(from_user, to_user)

        result, attempts = self._run_locked(
            pair,
            "record_disinterest",
            lambda: self._disinterest_step(from_user, to_user),
        )

        logger.info(
            f"Disinterest recorded: {from_user}->{to_user} "
            f"outcome={result.outcome.value} repeated={result.repeated}"
        )
        return result.model_copy(update={"attempts": attempts})

    # ========================================================================
    # DECISION STEPS (run inside the pair lock)
    # ========================================================================

    def _interest_step(self, from_user: str, to_user: str) -> SwipeResult:
        now = self.clock()
        own, reciprocal = self.edge_store.get_pair(from_user, to_user)

        if own is not None and own.is_connected():
            return self._result(SwipeOutcome.ALREADY_MATCHED, own, now, repeated=True)

        if own is not None and own.is_pending():
            if reciprocal is None or not reciprocal.is_pending():
                return self._result(SwipeOutcome.NEW, own, now, repeated=True)
            # Two pending edges left by a writer that did not connect them
            return self._connect_pending_pair(own, now)

        if own is not None:
            self._check_reswipe_allowed(own, now)

        written = self.edge_store.commit_interest(from_user, to_user, own, reciprocal)
        if written is None:
            raise _WriteConflict(f"interest {from_user}->{to_user}")

        if own is not None:
            logger.info(f"Rejected edge reopened by re-swipe: {from_user}->{to_user}")

        outcome = SwipeOutcome.MATCHED if written.is_connected() else SwipeOutcome.NEW
        return self._result(outcome, written, now)

    def _connect_pending_pair(self, own: InterestEdge, now: datetime) -> SwipeResult:
        commit = self.edge_store.transition_pair_to_connected(own.from_user, own.to_user)
        logger.debug(f"Pair transition {own.from_user}<->{own.to_user}: {commit.value}")

        if commit is CommitResult.APPLIED:
            return self._result(
                SwipeOutcome.MATCHED, own, now, status=EdgeStatus.CONNECTED
            )
        if commit is CommitResult.ALREADY_APPLIED:
            return self._result(
                SwipeOutcome.ALREADY_MATCHED,
                own,
                now,
                status=EdgeStatus.CONNECTED,
                repeated=True,
            )
        raise _WriteConflict(f"connect {own.from_user}<->{own.to_user}")

    def _disinterest_step(self, from_user: str, to_user: str) -> SwipeResult:
        now = self.clock()
        edge, created = self.edge_store.upsert_edge_if_absent(
            from_user, to_user, EdgeStatus.REJECTED
        )

        if created:
            return self._result(SwipeOutcome.REJECTED, edge, now)

        if edge.is_rejected():
            return self._result(SwipeOutcome.REJECTED, edge, now, repeated=True)

        if edge.is_connected():
            return self._result(SwipeOutcome.ALREADY_MATCHED, edge, now)

        rejected = self.edge_store.compare_and_set_status(edge, EdgeStatus.REJECTED)
        if rejected is None:
            raise _WriteConflict(f"reject {from_user}->{to_user}")
        return self._result(SwipeOutcome.REJECTED, rejected, now)

    def _check_reswipe_allowed(self, edge: InterestEdge, now: datetime) -> None:
        """
        Apply the re-swipe policy to interest on a rejected edge.

        Raises:
            ReswipeForbiddenError: Policy FORBID
            ReswipeCooldownError: Policy ALLOW_AFTER_COOLDOWN, cooldown not over
        """
        policy = self.config.reswipe_policy

        if policy is ReswipePolicy.ALLOW:
            return

        if policy is ReswipePolicy.FORBID:
            raise ReswipeForbiddenError(
                f"{edge.from_user} already rejected {edge.to_user}",
                from_user=edge.from_user,
                to_user=edge.to_user,
            )

        elapsed = (now - edge.updated_at).total_seconds()
        remaining = self.config.reswipe_cooldown_seconds - elapsed
        if remaining > 0:
            raise ReswipeCooldownError(
                f"{edge.from_user} rejected {edge.to_user} too recently",
                from_user=edge.from_user,
                to_user=edge.to_user,
                retry_after_seconds=math.ceil(remaining),
            )

    # ========================================================================
    # HELPERS
    # ========================================================================

    def _validate(self, from_user: str, to_user: str) -> PairKey:
        pair = PairKey.of(from_user, to_user)

        if self.user_directory is not None:
            for user_id in (from_user, to_user):
                if not self.user_directory.exists(user_id):
                    raise UnknownUserError(
                        f"User {user_id!r} is not known", user_id=user_id
                    )

        return pair

    def _run_locked(
        self,
        pair: PairKey,
        operation: str,
        step: Callable[[], SwipeResult],
    ) -> tuple[SwipeResult, int]:
        """
        Run step inside the pair lock, restarting it after conflicts.

        Lock timeouts surface immediately. Write conflicts and transient
        store errors are retried with backoff until max_attempts is reached.

        Returns:
            Tuple (result of the successful attempt, attempt number)
        """
        max_attempts = self.config.max_attempts

        for attempt in range(1, max_attempts + 1):
            try:
                with self.pair_lock.hold(pair):
                    return step(), attempt
            except LockAcquisitionTimeoutError:
                logger.warning(f"{operation} on {pair}: lock wait timed out")
                raise
            except _WriteConflict as e:
                logger.warning(
                    f"{operation} on {pair}: write conflict ({e}), "
                    f"attempt {attempt}/{max_attempts}"
                )
                if attempt == max_attempts:
                    raise ConflictExhaustedError(str(pair), attempts=attempt) from None
            except TransientStoreError as e:
                logger.warning(
                    f"{operation} on {pair}: transient store error, "
                    f"attempt {attempt}/{max_attempts}: {e}"
                )
                if attempt == max_attempts:
                    raise

            self.sleep(self.config.backoff_delay(attempt))

        # range() is never empty (max_attempts >= 1) and every branch returns or raises
        raise ConflictExhaustedError(str(pair), attempts=max_attempts)

    def _dispatch_match(self, pair: PairKey) -> bool:
        """Notify the publisher outside the lock. Failures never undo the match."""
        try:
            self.publisher.publish_match(pair.low, pair.high)
        except Exception:
            logger.exception(f"Match notification failed for {pair}")
            return False
        return True

    @staticmethod
    def _result(
        outcome: SwipeOutcome,
        edge: InterestEdge,
        now: datetime,
        status: Optional[EdgeStatus] = None,
        repeated: bool = False,
    ) -> SwipeResult:
        return SwipeResult.create(
            outcome=outcome,
            from_user=edge.from_user,
            to_user=edge.to_user,
            edge_status=status or edge.status,
            decided_at=now,
            repeated=repeated,
        )
