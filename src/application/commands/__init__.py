"""
CQRS Commands (write operations).
"""

from src.application.commands.record_swipe import RecordSwipeCommand

__all__ = ["RecordSwipeCommand"]
