"""
Redis User Directory

Known users are kept in one Redis SET ("users:known"). Registration is
owned by the profile service; this module only reads it, plus `register`
for seeding and tests.
"""

import logging
from typing import Optional

from redis import Redis
from redis.exceptions import RedisError

from src.domain.matching.value_objects.user_id import validate_user_id
from src.domain.shared.exceptions import TransientStoreError
from src.infrastructure.persistence.redis.connection import get_redis_client

logger = logging.getLogger(__name__)


class RedisUserDirectory:
    """UserDirectoryProtocol backed by a Redis SET."""

    def __init__(self, redis_client: Optional[Redis] = None, key_prefix: str = "") -> None:
        self.redis: Redis = redis_client if redis_client is not None else get_redis_client()
        self.users_key = f"{key_prefix}:users:known" if key_prefix else "users:known"

    def exists(self, user_id: str) -> bool:
        try:
            return bool(self.redis.sismember(self.users_key, user_id))
        except RedisError as e:
            raise TransientStoreError(
                "Failed to look up user", operation="user_exists", original_error=e
            ) from e

    def all_user_ids(self) -> list[str]:
        try:
            return sorted(self.redis.smembers(self.users_key))
        except RedisError as e:
            raise TransientStoreError(
                "Failed to list users", operation="all_user_ids", original_error=e
            ) from e

    def register(self, *user_ids: str) -> int:
        """
        Add users to the directory.

        Returns:
            Number of users that were not registered before
        """
        for user_id in user_ids:
            validate_user_id(user_id)
        if not user_ids:
            return 0
        try:
            added = int(self.redis.sadd(self.users_key, *user_ids))
        except RedisError as e:
            raise TransientStoreError(
                "Failed to register users", operation="register_users", original_error=e
            ) from e
        logger.info(f"Registered {added} new user(s) in {self.users_key}")
        return added
