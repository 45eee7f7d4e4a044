"""
EdgeStatus Value Object

Lifecycle states of a directional interest edge and the transitions
between them.

State transitions:
    PENDING -> CONNECTED   (pair promotion, both edges at once)
    PENDING -> REJECTED    (user changed their mind before a match)
    REJECTED -> PENDING    (re-swipe, only if policy allows)
    CONNECTED is terminal for the engine (unmatching happens elsewhere)
"""

from enum import Enum
from typing import Final


class EdgeStatus(str, Enum):
    """
    Status of an InterestEdge.

    States:
        PENDING: Interest recorded, no verdict from the other side yet
        REJECTED: Explicit disinterest
        CONNECTED: Matched (holds on both directional edges or neither)
    """

    PENDING = "pending"
    REJECTED = "rejected"
    CONNECTED = "connected"


ALLOWED_TRANSITIONS: Final[dict[EdgeStatus, frozenset[EdgeStatus]]] = {
    EdgeStatus.PENDING: frozenset({EdgeStatus.CONNECTED, EdgeStatus.REJECTED}),
    EdgeStatus.REJECTED: frozenset({EdgeStatus.PENDING}),
    EdgeStatus.CONNECTED: frozenset(),
}
