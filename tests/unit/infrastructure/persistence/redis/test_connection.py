"""
Tests for Redis Connection Pool Management.

Covers:
- Singleton connection pool (created once, thread-safe)
- Configuration from arguments and environment
- PING retry with exponential backoff (0.5s, 1s, 2s)
- Health check never raises on RedisError
- Connection cleanup
"""

import threading
from unittest.mock import MagicMock, patch

import pytest
from redis.exceptions import ConnectionError, RedisError, TimeoutError

import src.infrastructure.persistence.redis.connection as conn_module
from src.infrastructure.persistence.redis.connection import (
    close_connections,
    get_redis_client,
    health_check,
)

POOL = "src.infrastructure.persistence.redis.connection.ConnectionPool"
REDIS = "src.infrastructure.persistence.redis.connection.Redis"


# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture(autouse=True)
def reset_singleton():
    """Reset singleton pool before and after each test."""
    conn_module._redis_pool = None
    yield
    conn_module._redis_pool = None


@pytest.fixture
def mock_redis_class():
    """Patch ConnectionPool and Redis; yields the Redis class mock."""
    with patch(POOL) as pool_class, patch(REDIS) as redis_class:
        client = MagicMock()
        client.ping.return_value = True
        redis_class.return_value = client
        redis_class.pool_class = pool_class
        yield redis_class


# ============================================================================
# get_redis_client()
# ============================================================================


def test_get_redis_client_reuses_pool(mock_redis_class):
    get_redis_client()
    get_redis_client()

    assert mock_redis_class.pool_class.call_count == 1


def test_get_redis_client_defaults(mock_redis_class, monkeypatch):
    for name in ("REDIS_HOST", "REDIS_PORT", "REDIS_MAX_CONNECTIONS", "REDIS_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)

    get_redis_client()

    kwargs = mock_redis_class.pool_class.call_args.kwargs
    assert kwargs["host"] == "localhost"
    assert kwargs["port"] == 6379
    assert kwargs["db"] == 0
    assert kwargs["max_connections"] == 20
    assert kwargs["socket_timeout"] == 5.0
    assert kwargs["socket_keepalive"] is True
    assert kwargs["decode_responses"] is True


def test_get_redis_client_custom_arguments(mock_redis_class):
    get_redis_client(host="redis.example.com", port=6380, db=2, max_connections=50, timeout=1.5)

    kwargs = mock_redis_class.pool_class.call_args.kwargs
    assert kwargs["host"] == "redis.example.com"
    assert kwargs["port"] == 6380
    assert kwargs["db"] == 2
    assert kwargs["max_connections"] == 50
    assert kwargs["socket_connect_timeout"] == 1.5


def test_get_redis_client_reads_env(mock_redis_class, monkeypatch):
    monkeypatch.setenv("REDIS_HOST", "redis-prod")
    monkeypatch.setenv("REDIS_PORT", "6390")
    monkeypatch.setenv("REDIS_MAX_CONNECTIONS", "64")
    monkeypatch.setenv("REDIS_TIMEOUT", "2.5")

    get_redis_client()

    kwargs = mock_redis_class.pool_class.call_args.kwargs
    assert kwargs["host"] == "redis-prod"
    assert kwargs["port"] == 6390
    assert kwargs["max_connections"] == 64
    assert kwargs["socket_timeout"] == 2.5


def test_get_redis_client_retries_ping_with_backoff(mock_redis_class, monkeypatch):
    monkeypatch.setenv("REDIS_RETRY_ATTEMPTS", "4")
    client = mock_redis_class.return_value
    client.ping.side_effect = [
        ConnectionError("refused"),
        TimeoutError("timeout"),
        ConnectionError("refused"),
        True,
    ]

    with patch("time.sleep") as mock_sleep:
        assert get_redis_client() is client

    assert client.ping.call_count == 4
    assert [c.args[0] for c in mock_sleep.call_args_list] == [0.5, 1.0, 2.0]


def test_get_redis_client_raises_after_all_attempts(mock_redis_class, monkeypatch):
    monkeypatch.setenv("REDIS_RETRY_ATTEMPTS", "3")
    mock_redis_class.return_value.ping.side_effect = ConnectionError("refused")

    with patch("time.sleep"):
        with pytest.raises(RedisError, match="after 3 attempts"):
            get_redis_client()

    assert mock_redis_class.return_value.ping.call_count == 3


def test_get_redis_client_is_thread_safe():
    created = []

    def make_pool(*args, **kwargs):
        created.append(kwargs)
        return MagicMock()

    with patch(POOL, side_effect=make_pool), patch(REDIS) as redis_class:
        redis_class.return_value.ping.return_value = True
        threads = [threading.Thread(target=get_redis_client) for _ in range(10)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

    assert len(created) == 1


# ============================================================================
# health_check()
# ============================================================================


def test_health_check_ok():
    with patch("src.infrastructure.persistence.redis.connection.get_redis_client") as get_client:
        get_client.return_value.ping.return_value = True

        assert health_check() is True


def test_health_check_ping_false():
    with patch("src.infrastructure.persistence.redis.connection.get_redis_client") as get_client:
        get_client.return_value.ping.return_value = False

        assert health_check() is False


def test_health_check_swallows_redis_error():
    with patch(
        "src.infrastructure.persistence.redis.connection.get_redis_client",
        side_effect=RedisError("Cannot connect"),
    ):
        assert health_check() is False


# ============================================================================
# close_connections()
# ============================================================================


def test_close_connections_disconnects_and_resets():
    pool = MagicMock()
    conn_module._redis_pool = pool

    close_connections()

    pool.disconnect.assert_called_once()
    assert conn_module._redis_pool is None


def test_close_connections_is_idempotent():
    close_connections()
    close_connections()

    assert conn_module._redis_pool is None


def test_close_connections_resets_even_on_error():
    pool = MagicMock()
    pool.disconnect.side_effect = RedisError("already closed")
    conn_module._redis_pool = pool

    close_connections()

    assert conn_module._redis_pool is None
