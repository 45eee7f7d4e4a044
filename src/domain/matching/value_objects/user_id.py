"""
User Identifier Validation

User identifiers are opaque to the matching engine. The engine only checks
that an identifier is well-formed, because identifiers become parts of lock
keys, dedup keys and Redis key names.

Business Rules:
    - Must be a string of 1-128 characters
    - Allowed characters: letters, digits, "_", ".", "@", "-"
    - UUIDs, numeric ids and slugs are all accepted
    - Leading/trailing whitespace is a format error (not silently stripped)
"""

import re
from typing import Final

from src.domain.shared.exceptions import InvalidUserIdError

MAX_USER_ID_LENGTH: Final[int] = 128
USER_ID_PATTERN: Final[re.Pattern[str]] = re.compile(r"[A-Za-z0-9_.@\-]+")


def validate_user_id(user_id: object) -> str:
    """
    Validate a user identifier and return it unchanged.

    Args:
        user_id: Candidate identifier

    Returns:
        The identifier as given

    Raises:
        InvalidUserIdError: If the identifier is not a well-formed string

    Examples:
        >>> validate_user_id("3fa85f64-5717-4562-b3fc-2c963f66afa6")
        '3fa85f64-5717-4562-b3fc-2c963f66afa6'
        >>> validate_user_id("bad id")
        Traceback (most recent call last):
        ...
        InvalidUserIdError: ...
    """
    if not isinstance(user_id, str):
        raise InvalidUserIdError(
            f"User id must be string, got {type(user_id).__name__}", user_id=user_id
        )

    if not user_id:
        raise InvalidUserIdError("User id must not be empty", user_id=user_id)

    if len(user_id) > MAX_USER_ID_LENGTH:
        raise InvalidUserIdError(
            f"User id must have at most {MAX_USER_ID_LENGTH} characters, "
            f"got {len(user_id)}",
            user_id=user_id,
        )

    if not USER_ID_PATTERN.fullmatch(user_id):
        raise InvalidUserIdError(
            f"User id {user_id!r} contains characters outside [A-Za-z0-9_.@-]",
            user_id=user_id,
        )

    return user_id
