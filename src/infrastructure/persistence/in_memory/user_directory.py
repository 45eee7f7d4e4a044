"""
In-Memory User Directory

Set of known user ids guarded by a lock.
"""

import threading
from typing import Iterable

from src.domain.matching.value_objects.user_id import validate_user_id


class InMemoryUserDirectory:
    """
    UserDirectoryProtocol backed by a Python set.

    Examples:
        >>> directory = InMemoryUserDirectory(["alice", "bob"])
        >>> directory.exists("alice"), directory.exists("carol")
        (True, False)
    """

    def __init__(self, user_ids: Iterable[str] = ()) -> None:
        self._users: set[str] = set()
        self._lock = threading.Lock()
        self.register(*user_ids)

    def exists(self, user_id: str) -> bool:
        with self._lock:
            return user_id in self._users

    def all_user_ids(self) -> list[str]:
        with self._lock:
            return sorted(self._users)

    def register(self, *user_ids: str) -> int:
        """Add users; returns how many were new."""
        for user_id in user_ids:
            validate_user_id(user_id)
        with self._lock:
            before = len(self._users)
            self._users.update(user_ids)
            return len(self._users) - before
