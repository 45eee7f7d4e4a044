"""
Matching Entities.

Entities have identity and a lifecycle.

Available Entities:
    - InterestEdge: Directional interest record (from_user -> to_user)
"""

from src.domain.matching.entities.interest_edge import InterestEdge, utc_now

__all__ = ["InterestEdge", "utc_now"]
