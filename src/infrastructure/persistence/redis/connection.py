"""
Redis Connection Pool Management.

Singleton connection pool shared by RedisEdgeStore, RedisUserDirectory,
RedisPairLock and the Celery match publisher.

Responsibility:
    - Manage one Redis connection pool per process
    - Verify connectivity with PING, retrying with exponential backoff
    - Health check for the /health endpoint
    - Close the pool on shutdown

Architecture Notes:
    - Infrastructure Layer (external dependency on Redis)
    - Thread-safe singleton (double-checked locking with threading.Lock)
    - Environment-based configuration

Configuration (environment):
    - REDIS_HOST (default "localhost"), REDIS_PORT (default 6379)
    - REDIS_MAX_CONNECTIONS (default 20): the engine holds a connection
      per in-flight swipe plus one per pair lock
    - REDIS_TIMEOUT (default 5 seconds, socket and connect timeout)
    - REDIS_RETRY_ATTEMPTS (default 3), backoff 0.5s, 1s, 2s

Error Handling:
    - ConnectionError / TimeoutError on PING: retried with backoff
    - RedisError raised after all attempts; stores wrap it into
      TransientStoreError
    - health_check never raises
"""

import logging
import os
import threading
import time
from typing import Final, Optional

from redis import ConnectionPool, Redis
from redis.exceptions import ConnectionError, RedisError, TimeoutError

logger = logging.getLogger(__name__)

PING_BACKOFF_BASE_SECONDS: Final[float] = 0.5

_redis_pool: Optional[ConnectionPool] = None
_pool_lock = threading.Lock()


def _create_pool(host: str, port: int, db: int, max_connections: int, timeout: float) -> ConnectionPool:
    logger.info(
        f"Creating Redis connection pool: host={host}, port={port}, db={db}, "
        f"max_connections={max_connections}, timeout={timeout}s"
    )
    return ConnectionPool(
        host=host,
        port=port,
        db=db,
        max_connections=max_connections,
        socket_timeout=timeout,
        socket_connect_timeout=timeout,
        socket_keepalive=True,
        decode_responses=True,  # edge hashes are read back as str
    )


def _ping_with_retry(client: Redis, attempts: int) -> None:
    """
    PING until Redis answers or the attempts run out.

    Raises:
        RedisError: If every attempt failed
    """
    last_error: Optional[Exception] = None

    for attempt in range(1, attempts + 1):
        try:
            client.ping()
            logger.debug(f"Redis connection verified (attempt {attempt})")
            return
        except (ConnectionError, TimeoutError) as e:
            last_error = e
            if attempt == attempts:
                logger.error(f"Redis unreachable after {attempts} attempts: {e}")
                break
            delay = PING_BACKOFF_BASE_SECONDS * (2 ** (attempt - 1))
            logger.warning(
                f"Redis PING failed (attempt {attempt}/{attempts}): {e}. "
                f"Retrying in {delay}s..."
            )
            time.sleep(delay)

    raise RedisError(
        f"Failed to connect to Redis after {attempts} attempts. Last error: {last_error}"
    )


def get_redis_client(
    host: Optional[str] = None,
    port: Optional[int] = None,
    db: int = 0,
    max_connections: Optional[int] = None,
    timeout: Optional[float] = None,
) -> Redis:
    """
    Get a Redis client backed by the process-wide connection pool.

    The pool is created on the first call; later calls reuse it and ignore
    the connection arguments.

    Args:
        host: Redis hostname (default REDIS_HOST or "localhost")
        port: Redis port (default REDIS_PORT or 6379)
        db: Redis database number (default 0)
        max_connections: Max pool size (default REDIS_MAX_CONNECTIONS or 20)
        timeout: Socket timeout in seconds (default REDIS_TIMEOUT or 5)

    Returns:
        Redis client with decode_responses=True

    Raises:
        RedisError: If PING fails after REDIS_RETRY_ATTEMPTS attempts

    Examples:
        >>> client = get_redis_client()
        >>> store = RedisEdgeStore(client)
    """
    global _redis_pool

    if _redis_pool is None:
        with _pool_lock:
            if _redis_pool is None:
                _redis_pool = _create_pool(
                    host=host or os.getenv("REDIS_HOST", "localhost"),
                    port=port or int(os.getenv("REDIS_PORT", "6379")),
                    db=db,
                    max_connections=max_connections
                    or int(os.getenv("REDIS_MAX_CONNECTIONS", "20")),
                    timeout=timeout or float(os.getenv("REDIS_TIMEOUT", "5")),
                )

    client = Redis(connection_pool=_redis_pool)
    _ping_with_retry(client, attempts=int(os.getenv("REDIS_RETRY_ATTEMPTS", "3")))
    return client


def health_check() -> bool:
    """
    Check Redis health with a PING.

    Returns:
        True if Redis answered, False on any error (never raises)
    """
    try:
        if get_redis_client().ping():
            logger.debug("Redis health check: OK")
            return True
        logger.warning("Redis health check: PING returned False")
        return False

    except RedisError as e:
        logger.warning(f"Redis health check failed: {e}")
        return False


def close_connections() -> None:
    """
    Disconnect the pool and reset the singleton.

    Safe to call multiple times. Called on API shutdown.
    """
    global _redis_pool

    with _pool_lock:
        if _redis_pool is None:
            logger.debug("Redis connection pool already closed or not initialized")
            return

        logger.info("Closing Redis connection pool")
        try:
            _redis_pool.disconnect()
        except RedisError as e:
            logger.error(f"Error closing Redis connection pool: {e}")
        finally:
            _redis_pool = None
