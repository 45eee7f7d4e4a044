"""
Tests for RecordSwipeCommand and RecordSwipeUseCase.

Covers:
- Command is immutable and validates the pair
- Direction routes to record_interest / record_disinterest
- Domain SwipeResult -> RecordSwipeResult mapping
- Validation happens before the engine is called
- Domain exceptions propagate unchanged
"""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from pydantic import ValidationError

from src.application.commands.record_swipe import RecordSwipeCommand
from src.application.models import SwipeDirection
from src.application.services.record_swipe_use_case import (
    RecordSwipeResult,
    RecordSwipeUseCase,
)
from src.domain.matching.value_objects import EdgeStatus, SwipeOutcome, SwipeResult
from src.domain.shared.exceptions import (
    InvalidUserPairError,
    ReswipeForbiddenError,
)

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


def make_result(outcome=SwipeOutcome.NEW, status=EdgeStatus.PENDING, **overrides) -> SwipeResult:
    result = SwipeResult.create(
        outcome=outcome,
        from_user="alice",
        to_user="bob",
        edge_status=status,
        decided_at=NOW,
    )
    return result.model_copy(update=overrides)


@pytest.fixture
def mock_engine():
    engine = MagicMock()
    engine.record_interest.return_value = make_result()
    engine.record_disinterest.return_value = make_result(
        SwipeOutcome.REJECTED, EdgeStatus.REJECTED
    )
    return engine


# ============================================================================
# COMMAND
# ============================================================================


def test_command_accepts_direction_string():
    command = RecordSwipeCommand(from_user="alice", to_user="bob", direction="disinterest")

    assert command.direction is SwipeDirection.DISINTEREST
    assert str(command.validate_business_rules()) == "alice|bob"


def test_command_rejects_unknown_direction():
    with pytest.raises(ValidationError):
        RecordSwipeCommand(from_user="alice", to_user="bob", direction="superlike")


def test_command_is_frozen():
    command = RecordSwipeCommand(from_user="alice", to_user="bob", direction="interest")

    with pytest.raises(ValidationError):
        command.to_user = "carol"


def test_command_self_swipe():
    command = RecordSwipeCommand(from_user="alice", to_user="alice", direction="interest")

    with pytest.raises(InvalidUserPairError):
        command.validate_business_rules()


# ============================================================================
# USE CASE
# ============================================================================


@pytest.mark.asyncio
async def test_interest_routes_to_record_interest(mock_engine):
    use_case = RecordSwipeUseCase(mock_engine)

    result = await use_case.execute(
        RecordSwipeCommand(from_user="alice", to_user="bob", direction=SwipeDirection.INTEREST)
    )

    mock_engine.record_interest.assert_called_once_with("alice", "bob")
    mock_engine.record_disinterest.assert_not_called()
    assert isinstance(result, RecordSwipeResult)
    assert result.outcome == "new"
    assert result.edge_status == "pending"
    assert result.is_match is False


@pytest.mark.asyncio
async def test_disinterest_routes_to_record_disinterest(mock_engine):
    use_case = RecordSwipeUseCase(mock_engine)

    result = await use_case.execute(
        RecordSwipeCommand(from_user="alice", to_user="bob", direction=SwipeDirection.DISINTEREST)
    )

    mock_engine.record_disinterest.assert_called_once_with("alice", "bob")
    assert result.outcome == "rejected"


@pytest.mark.asyncio
async def test_match_result_mapping(mock_engine):
    mock_engine.record_interest.return_value = make_result(
        SwipeOutcome.MATCHED,
        EdgeStatus.CONNECTED,
        attempts=2,
        notification_dispatched=True,
    )

    result = await RecordSwipeUseCase(mock_engine).execute(
        RecordSwipeCommand(from_user="alice", to_user="bob", direction="interest")
    )

    assert result.model_dump() == {
        "outcome": "matched",
        "from_user": "alice",
        "to_user": "bob",
        "pair_key": "alice|bob",
        "edge_status": "connected",
        "is_match": True,
        "repeated": False,
        "attempts": 2,
        "notification_dispatched": True,
        "decided_at": NOW,
    }


@pytest.mark.asyncio
async def test_invalid_pair_never_reaches_engine(mock_engine):
    with pytest.raises(InvalidUserPairError):
        await RecordSwipeUseCase(mock_engine).execute(
            RecordSwipeCommand(from_user="bob", to_user="bob", direction="interest")
        )

    mock_engine.record_interest.assert_not_called()


@pytest.mark.asyncio
async def test_domain_exception_propagates(mock_engine):
    mock_engine.record_interest.side_effect = ReswipeForbiddenError(
        "alice already rejected bob", from_user="alice", to_user="bob"
    )

    with pytest.raises(ReswipeForbiddenError):
        await RecordSwipeUseCase(mock_engine).execute(
            RecordSwipeCommand(from_user="alice", to_user="bob", direction="interest")
        )


@pytest.mark.asyncio
async def test_with_real_engine(engine):
    use_case = RecordSwipeUseCase(engine)

    first = await use_case.execute(
        RecordSwipeCommand(from_user="alice", to_user="bob", direction="interest")
    )
    second = await use_case.execute(
        RecordSwipeCommand(from_user="bob", to_user="alice", direction="interest")
    )

    assert first.outcome == "new"
    assert second.outcome == "matched"
    assert second.notification_dispatched is True
