"""
Domain Layer - Core Business Logic

Heart of the SwipeMatch service. Contains all business rules, entities,
value objects, and domain services. Framework-independent and highly testable.

Architecture:
    - Clean Architecture: Domain Layer is the center, no infrastructure imports
    - Domain-Driven Design: Entities, Value Objects, Services, Repositories
    - Dependency Inversion: Domain defines interfaces, Infrastructure implements

Subdomains:
    - matching: Interest edges, pair transitions, MatchEngine
    - shared: Cross-subdomain concepts (exception hierarchy)

Usage:
    >>> from src.domain import MatchEngine, SwipeOutcome, DomainException
    >>> from src.domain.matching.entities import InterestEdge
"""

# Matching Subdomain
from .matching import (
    EdgeStatus,
    EdgeStoreProtocol,
    InterestEdge,
    MatchEngine,
    MatchingConfig,
    PairKey,
    SwipeOutcome,
    SwipeResult,
)

# Shared Domain
from .shared import DomainException

__all__ = [
    # Matching Subdomain
    "InterestEdge",
    "EdgeStatus",
    "PairKey",
    "SwipeOutcome",
    "SwipeResult",
    "MatchEngine",
    "MatchingConfig",
    "EdgeStoreProtocol",
    # Shared Domain
    "DomainException",
]
