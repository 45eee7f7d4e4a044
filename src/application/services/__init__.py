"""
Application Services (Use Cases)

Contains:
    - RecordSwipeUseCase: runs a swipe through MatchEngine

Does NOT contain:
    - Domain business logic (use Domain services)
    - Direct infrastructure calls (use dependency injection)
"""

from src.application.services.record_swipe_use_case import (
    RecordSwipeResult,
    RecordSwipeUseCase,
)

__all__ = ["RecordSwipeUseCase", "RecordSwipeResult"]
