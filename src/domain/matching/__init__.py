"""
Matching Subdomain Module

Mutual-interest matching: directional interest edges between users and
their promotion to a connected pair.

Exports:
    Entities:
        - InterestEdge: Directional interest record

    Value Objects:
        - EdgeStatus, PairKey, SwipeOutcome, SwipeResult, CommitResult, MatchEvent

    Services:
        - MatchEngine: Records swipes, forms matches exactly once
        - PairLockProtocol, EventPublisherProtocol, CandidateSourceProtocol

    Repository Interfaces:
        - EdgeStoreProtocol, UserDirectoryProtocol

    Configuration:
        - MatchingConfig, ReswipePolicy

Usage:
    >>> from src.domain.matching import MatchEngine, SwipeOutcome
    >>> from src.domain.matching.entities import InterestEdge
"""

# Value Objects
from .value_objects import (
    CommitResult,
    EdgeStatus,
    MatchEvent,
    PairKey,
    SwipeOutcome,
    SwipeResult,
)

# Entities
from .entities import InterestEdge

# Configuration
from .matching_config import MatchingConfig, ReswipePolicy

# Repository Interfaces
from .repositories import EdgeStoreProtocol, UserDirectoryProtocol

# Services
from .services import (
    CandidateSourceProtocol,
    EventPublisherProtocol,
    MatchEngine,
    PairLockProtocol,
)

__all__ = [
    "InterestEdge",
    "EdgeStatus",
    "PairKey",
    "SwipeOutcome",
    "SwipeResult",
    "CommitResult",
    "MatchEvent",
    "MatchingConfig",
    "ReswipePolicy",
    "EdgeStoreProtocol",
    "UserDirectoryProtocol",
    "MatchEngine",
    "PairLockProtocol",
    "EventPublisherProtocol",
    "CandidateSourceProtocol",
]
