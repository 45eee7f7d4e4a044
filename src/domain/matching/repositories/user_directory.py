"""
UserDirectory Interface

Answers "is this identifier a user known to the system". Profile data lives
elsewhere; the matching subdomain only needs membership and enumeration.
"""

from typing import Protocol


class UserDirectoryProtocol(Protocol):
    """
    Protocol for user membership lookups.

    Implementations: InMemoryUserDirectory, RedisUserDirectory.
    """

    def exists(self, user_id: str) -> bool:
        """True if user_id belongs to a known user."""
        ...

    def all_user_ids(self) -> list[str]:
        """All known user ids in a stable (sorted) order."""
        ...
