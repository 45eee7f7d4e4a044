"""
API Dependency Injection

Builds the matching object graph once per process and exposes FastAPI
dependencies returning Application Layer handlers.

Responsibility:
    - Select the backend from EDGE_STORE_BACKEND ("memory" | "redis")
    - Wire MatchEngine with store, pair lock, publisher and config
    - Provide get_* dependencies for routers

Configuration (environment):
    - EDGE_STORE_BACKEND: "memory" (default, single process) or "redis"
    - MATCH_REQUIRE_KNOWN_USERS: "true" to reject users missing from the
      user directory (UnknownUserError -> 404)
    - SEED_USER_IDS: comma-separated ids registered in the in-memory directory
    - MATCH_* variables: see MatchingConfig.from_env()

Testing:
    Override get_container via app.dependency_overrides to inject a
    container built with build_in_memory_container().
"""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from fastapi import Depends

from src.application.queries.get_pair_status import GetPairStatusQueryHandler
from src.application.queries.list_candidates import ListCandidatesQueryHandler
from src.application.queries.list_connections import ListConnectionsQueryHandler
from src.application.services.record_swipe_use_case import RecordSwipeUseCase
from src.domain.matching.matching_config import MatchingConfig
from src.domain.matching.repositories.edge_store import EdgeStoreProtocol
from src.domain.matching.repositories.user_directory import UserDirectoryProtocol
from src.domain.matching.services.candidate_source import CandidateSourceProtocol
from src.domain.matching.services.event_publisher import EventPublisherProtocol
from src.domain.matching.services.match_engine import MatchEngine
from src.infrastructure.candidates import DirectoryCandidateSource
from src.infrastructure.events import (
    CeleryMatchEventPublisher,
    InMemoryMatchEventPublisher,
)
from src.infrastructure.locking import InProcessPairLock, RedisPairLock
from src.infrastructure.persistence.in_memory import (
    InMemoryEdgeStore,
    InMemoryUserDirectory,
)
from src.infrastructure.persistence.redis import (
    RedisEdgeStore,
    RedisUserDirectory,
    get_redis_client,
)

logger = logging.getLogger(__name__)

BACKEND_MEMORY = "memory"
BACKEND_REDIS = "redis"


@dataclass
class MatchingContainer:
    """
    Process-wide collaborators of the matching service.

    Attributes:
        backend: "memory" or "redis"
        engine: MatchEngine wired to the backend
        edge_store: Store shared by engine and queries
        user_directory: Known users (feeds candidates)
        candidate_source: Candidate feed
        publisher: Match event publisher used by the engine
        require_known_users: Whether handlers reject unknown users
    """

    backend: str
    engine: MatchEngine
    edge_store: EdgeStoreProtocol
    user_directory: UserDirectoryProtocol
    candidate_source: CandidateSourceProtocol
    publisher: EventPublisherProtocol
    require_known_users: bool = False

    @property
    def membership_check(self) -> Optional[UserDirectoryProtocol]:
        return self.user_directory if self.require_known_users else None


def _env_flag(name: str) -> bool:
    return os.getenv(name, "false").strip().lower() in ("1", "true", "yes")


def build_in_memory_container(
    config: Optional[MatchingConfig] = None,
    user_ids: tuple[str, ...] = (),
    require_known_users: bool = False,
) -> MatchingContainer:
    """
    Single-process wiring: dict store, threading pair lock, in-memory publisher.

    Examples:
        >>> container = build_in_memory_container(user_ids=("alice", "bob"))
        >>> container.engine.record_interest("alice", "bob").outcome.value
        'new'
    """
    config = config or MatchingConfig.default()
    store = InMemoryEdgeStore()
    directory = InMemoryUserDirectory(user_ids)
    publisher = InMemoryMatchEventPublisher()

    engine = MatchEngine(
        edge_store=store,
        pair_lock=InProcessPairLock(wait_timeout_seconds=config.lock_wait_timeout_seconds),
        publisher=publisher,
        config=config,
        user_directory=directory if require_known_users else None,
    )
    return MatchingContainer(
        backend=BACKEND_MEMORY,
        engine=engine,
        edge_store=store,
        user_directory=directory,
        candidate_source=DirectoryCandidateSource(directory, store),
        publisher=publisher,
        require_known_users=require_known_users,
    )


def build_redis_container(
    config: Optional[MatchingConfig] = None,
    require_known_users: bool = False,
) -> MatchingContainer:
    """
    Multi-instance wiring: Redis store, Redis pair lock, Celery publisher.

    Raises:
        RedisError: If Redis is unreachable at startup
    """
    # Deferred: importing the task module loads the Celery app and .env
    from src.application.tasks.notification_tasks import deliver_match_event

    config = config or MatchingConfig.default()
    client = get_redis_client()
    store = RedisEdgeStore(client)
    directory = RedisUserDirectory(client)
    publisher = CeleryMatchEventPublisher(task=deliver_match_event, redis_client=client)

    engine = MatchEngine(
        edge_store=store,
        pair_lock=RedisPairLock(
            client,
            ttl_seconds=config.lock_ttl_seconds,
            wait_timeout_seconds=config.lock_wait_timeout_seconds,
        ),
        publisher=publisher,
        config=config,
        user_directory=directory if require_known_users else None,
    )
    return MatchingContainer(
        backend=BACKEND_REDIS,
        engine=engine,
        edge_store=store,
        user_directory=directory,
        candidate_source=DirectoryCandidateSource(directory, store),
        publisher=publisher,
        require_known_users=require_known_users,
    )


@lru_cache(maxsize=1)
def get_container() -> MatchingContainer:
    """
    Build the container from the environment (once per process).

    Raises:
        ValueError: If EDGE_STORE_BACKEND is not "memory" or "redis"
    """
    backend = os.getenv("EDGE_STORE_BACKEND", BACKEND_MEMORY).strip().lower()
    config = MatchingConfig.from_env()
    require_known = _env_flag("MATCH_REQUIRE_KNOWN_USERS")

    logger.info(
        f"Building matching container: backend={backend}, "
        f"require_known_users={require_known}, config={config.to_dict()}"
    )

    if backend == BACKEND_MEMORY:
        seed = tuple(u.strip() for u in os.getenv("SEED_USER_IDS", "").split(",") if u.strip())
        return build_in_memory_container(config, seed, require_known)
    if backend == BACKEND_REDIS:
        return build_redis_container(config, require_known)

    raise ValueError(f"EDGE_STORE_BACKEND must be 'memory' or 'redis', got {backend!r}")


# ============================================================================
# FASTAPI DEPENDENCIES
# ============================================================================


def get_record_swipe_use_case(
    container: MatchingContainer = Depends(get_container),
) -> RecordSwipeUseCase:
    return RecordSwipeUseCase(container.engine)


def get_list_connections_handler(
    container: MatchingContainer = Depends(get_container),
) -> ListConnectionsQueryHandler:
    return ListConnectionsQueryHandler(container.edge_store, container.membership_check)


def get_list_candidates_handler(
    container: MatchingContainer = Depends(get_container),
) -> ListCandidatesQueryHandler:
    return ListCandidatesQueryHandler(container.candidate_source, container.membership_check)


def get_pair_status_handler(
    container: MatchingContainer = Depends(get_container),
) -> GetPairStatusQueryHandler:
    return GetPairStatusQueryHandler(container.edge_store)
