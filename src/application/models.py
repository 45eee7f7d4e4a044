"""
Shared Application Models

Responsibility:
    Contains shared models used across Application Layer.
    Prevents circular dependencies between Commands, Services and API.

Contains:
    - SwipeDirection: Which way the user swiped
"""

from enum import Enum


class SwipeDirection(str, Enum):
    """
    Direction of a swipe.

    Attributes:
        INTEREST: User wants to connect (MatchEngine.record_interest)
        DISINTEREST: User passes (MatchEngine.record_disinterest)

    Usage:
        >>> SwipeDirection("interest") is SwipeDirection.INTEREST
        True
    """

    INTEREST = "interest"
    DISINTEREST = "disinterest"
