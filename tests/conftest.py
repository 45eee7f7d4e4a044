"""
Pytest Configuration and Shared Fixtures

This module contains pytest configuration and shared fixtures used across
all test suites (unit, integration).

Fixtures:
    - config: MatchingConfig with backoff disabled
    - edge_store / pair_lock / publisher: in-memory collaborators
    - engine: MatchEngine wired to the in-memory collaborators
    - container: in-memory MatchingContainer for API tests
    - test_client: FastAPI TestClient with get_container overridden
    - redis_client / clean_redis: real Redis for integration tests (skipped
      when Redis is not reachable)

Usage:
    Tests automatically have access to these fixtures by name:

    def test_something(engine):
        assert engine.record_interest("alice", "bob").outcome.value == "new"
"""

import logging
from typing import Generator

import pytest
from fastapi.testclient import TestClient

from src.api.dependencies import MatchingContainer, build_in_memory_container, get_container
from src.api.main import create_app
from src.domain.matching.matching_config import MatchingConfig
from src.domain.matching.services.match_engine import MatchEngine
from src.infrastructure.events import InMemoryMatchEventPublisher
from src.infrastructure.locking import InProcessPairLock
from src.infrastructure.persistence.in_memory import InMemoryEdgeStore
from src.infrastructure.persistence.redis.connection import (
    close_connections,
    get_redis_client,
    health_check,
)

# Configure logger for tests
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# ============================================================================
# ENGINE FIXTURES
# ============================================================================


@pytest.fixture
def config() -> MatchingConfig:
    """Default policy (forbid), no backoff sleeps."""
    return MatchingConfig.for_testing()


@pytest.fixture
def edge_store() -> InMemoryEdgeStore:
    return InMemoryEdgeStore()


@pytest.fixture
def pair_lock(config) -> InProcessPairLock:
    return InProcessPairLock(wait_timeout_seconds=config.lock_wait_timeout_seconds)


@pytest.fixture
def publisher() -> InMemoryMatchEventPublisher:
    return InMemoryMatchEventPublisher()


@pytest.fixture
def engine(edge_store, pair_lock, publisher, config) -> MatchEngine:
    """
    MatchEngine on in-memory collaborators.

    Examples:
        >>> def test_match(engine, publisher):
        ...     engine.record_interest("alice", "bob")
        ...     engine.record_interest("bob", "alice")
        ...     assert len(publisher.events) == 1
    """
    return MatchEngine(
        edge_store=edge_store,
        pair_lock=pair_lock,
        publisher=publisher,
        config=config,
    )


# ============================================================================
# FASTAPI FIXTURES
# ============================================================================


@pytest.fixture
def container() -> MatchingContainer:
    """In-memory container with a few known users."""
    return build_in_memory_container(
        config=MatchingConfig.for_testing(),
        user_ids=("alice", "bob", "carol", "dave"),
    )


@pytest.fixture
def test_client(container) -> Generator[TestClient, None, None]:
    """
    Provide FastAPI TestClient bound to a fresh in-memory container.

    TestClient doesn't require running server - it calls app directly.
    get_container is overridden, so no environment or Redis is involved.

    Examples:
        >>> def test_health_endpoint(test_client):
        ...     response = test_client.get("/health")
        ...     assert response.status_code == 200
        ...     assert response.json()["status"] == "ok"
    """
    app = create_app()
    app.dependency_overrides[get_container] = lambda: container
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


# ============================================================================
# REDIS FIXTURES
# ============================================================================


@pytest.fixture(scope="session")
def redis_client():
    """
    Provide Redis client for integration tests.

    Scope: session (shared across all tests in session)

    Skips the requesting test when Redis is not reachable, so the unit suite
    runs without Docker services.
    """
    if not health_check():
        close_connections()
        pytest.skip("Redis is not available (run 'docker-compose up -d redis')")

    client = get_redis_client()
    yield client
    close_connections()


@pytest.fixture
def clean_redis(redis_client):
    """
    Flush the Redis database before and after each test.

    Scope: function (runs before/after each test)
    """
    redis_client.flushdb()
    logger.info("Redis database flushed (before test)")

    yield redis_client

    redis_client.flushdb()
    logger.info("Redis database flushed (after test)")


# ============================================================================
# PYTEST CONFIGURATION
# ============================================================================


def pytest_collection_modifyitems(config, items):
    """
    Pytest collection hook.

    Adds the 'integration' marker to everything under tests/integration and
    'unit' to everything under tests/unit, so `pytest -m unit` works without
    decorating every test.
    """
    for item in items:
        path = str(item.fspath)
        if "/integration/" in path:
            item.add_marker(pytest.mark.integration)
        elif "/unit/" in path:
            item.add_marker(pytest.mark.unit)
