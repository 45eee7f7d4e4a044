"""
Matching Domain Services.

Exports:
    - MatchEngine: Records swipes and forms matches
    - PairLockProtocol, EventPublisherProtocol, CandidateSourceProtocol:
      collaborator interfaces implemented in Infrastructure Layer
"""

from src.domain.matching.services.candidate_source import CandidateSourceProtocol
from src.domain.matching.services.event_publisher import EventPublisherProtocol
from src.domain.matching.services.match_engine import MatchEngine
from src.domain.matching.services.pair_lock import PairLockProtocol

__all__ = [
    "MatchEngine",
    "PairLockProtocol",
    "EventPublisherProtocol",
    "CandidateSourceProtocol",
]
