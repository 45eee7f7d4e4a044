"""
Tests for InMemoryEdgeStore and InMemoryUserDirectory.

Covers:
- Create-if-absent semantics
- Compare-and-set on version
- Atomic pair transition results (APPLIED / ALREADY_APPLIED / CONFLICT)
- Interest commit against a pair snapshot (create, connect, reopen, miss)
- Read helpers (get_pair, list_edges_from/to, list_connections, related_user_ids)
- Returned edges are detached copies
- before_operation hook
- User directory registration and ordering
"""

from unittest.mock import MagicMock

import pytest

from src.domain.matching.entities.interest_edge import InterestEdge
from src.domain.matching.value_objects import CommitResult, EdgeStatus
from src.domain.shared.exceptions import (
    InvalidEdgeTransitionError,
    InvalidUserIdError,
)
from src.infrastructure.persistence.in_memory import (
    InMemoryEdgeStore,
    InMemoryUserDirectory,
)


@pytest.fixture
def store() -> InMemoryEdgeStore:
    return InMemoryEdgeStore()


# ============================================================================
# UPSERT
# ============================================================================


def test_upsert_creates_edge(store):
    edge, created = store.upsert_edge_if_absent("alice", "bob", EdgeStatus.PENDING)

    assert created is True
    assert edge.status is EdgeStatus.PENDING
    assert edge.version == 1
    assert store.get_edge("alice", "bob") == edge


def test_upsert_returns_existing_edge(store):
    store.upsert_edge_if_absent("alice", "bob", EdgeStatus.REJECTED)

    edge, created = store.upsert_edge_if_absent("alice", "bob", EdgeStatus.PENDING)

    assert created is False
    assert edge.status is EdgeStatus.REJECTED


def test_returned_edges_are_copies(store):
    edge, _ = store.upsert_edge_if_absent("alice", "bob", EdgeStatus.PENDING)
    edge.status = EdgeStatus.CONNECTED

    assert store.get_edge("alice", "bob").status is EdgeStatus.PENDING


# ============================================================================
# COMPARE AND SET
# ============================================================================


def test_compare_and_set_applies_on_matching_version(store):
    edge, _ = store.upsert_edge_if_absent("alice", "bob", EdgeStatus.PENDING)

    updated = store.compare_and_set_status(edge, EdgeStatus.REJECTED)

    assert updated.status is EdgeStatus.REJECTED
    assert updated.version == 2
    assert store.get_edge("alice", "bob").version == 2


def test_compare_and_set_misses_on_stale_version(store):
    edge, _ = store.upsert_edge_if_absent("alice", "bob", EdgeStatus.PENDING)
    store.compare_and_set_status(edge, EdgeStatus.REJECTED)

    assert store.compare_and_set_status(edge, EdgeStatus.REJECTED) is None
    assert store.get_edge("alice", "bob").version == 2


def test_compare_and_set_misses_on_missing_edge(store):
    ghost = InterestEdge(from_user="alice", to_user="bob")

    assert store.compare_and_set_status(ghost, EdgeStatus.REJECTED) is None


# ============================================================================
# PAIR TRANSITION
# ============================================================================


def test_pair_transition_applied(store):
    store.upsert_edge_if_absent("alice", "bob", EdgeStatus.PENDING)
    store.upsert_edge_if_absent("bob", "alice", EdgeStatus.PENDING)

    assert store.transition_pair_to_connected("alice", "bob") is CommitResult.APPLIED
    assert store.get_edge("alice", "bob").is_connected()
    assert store.get_edge("bob", "alice").is_connected()
    assert store.get_edge("alice", "bob").version == 2


def test_pair_transition_already_applied(store):
    store.upsert_edge_if_absent("alice", "bob", EdgeStatus.PENDING)
    store.upsert_edge_if_absent("bob", "alice", EdgeStatus.PENDING)
    store.transition_pair_to_connected("alice", "bob")

    assert store.transition_pair_to_connected("bob", "alice") is CommitResult.ALREADY_APPLIED
    assert store.get_edge("alice", "bob").version == 2


@pytest.mark.parametrize(
    "reciprocal_status",
    [None, EdgeStatus.REJECTED],
)
def test_pair_transition_conflict_writes_nothing(store, reciprocal_status):
    store.upsert_edge_if_absent("alice", "bob", EdgeStatus.PENDING)
    if reciprocal_status is not None:
        store.upsert_edge_if_absent("bob", "alice", reciprocal_status)

    assert store.transition_pair_to_connected("alice", "bob") is CommitResult.CONFLICT
    assert store.get_edge("alice", "bob").is_pending()


# ============================================================================
# INTEREST COMMIT
# ============================================================================


def test_commit_interest_creates_pending_edge(store):
    written = store.commit_interest("alice", "bob", None, None)

    assert written.status is EdgeStatus.PENDING
    assert written.version == 1
    assert store.get_edge("alice", "bob") == written
    assert store.get_edge("bob", "alice") is None


def test_commit_interest_connects_pending_reciprocal(store):
    reciprocal = store.commit_interest("bob", "alice", None, None)

    written = store.commit_interest("alice", "bob", None, reciprocal)

    assert written.is_connected()
    assert written.version == 1
    stored = store.get_edge("bob", "alice")
    assert stored.is_connected()
    assert stored.version == 2
    assert [e.to_user for e in store.list_connections("alice")] == ["bob"]


def test_commit_interest_reopens_rejected_edge(store):
    rejected, _ = store.upsert_edge_if_absent("alice", "bob", EdgeStatus.REJECTED)

    written = store.commit_interest("alice", "bob", rejected, None)

    assert written.is_pending()
    assert written.version == 2


def test_commit_interest_misses_when_reciprocal_appeared(store):
    store.commit_interest("bob", "alice", None, None)

    assert store.commit_interest("alice", "bob", None, None) is None
    assert store.get_edge("alice", "bob") is None
    assert store.get_edge("bob", "alice").is_pending()


def test_commit_interest_misses_when_own_edge_changed(store):
    rejected, _ = store.upsert_edge_if_absent("alice", "bob", EdgeStatus.REJECTED)
    store.put_edge(InterestEdge(from_user="alice", to_user="bob", status=EdgeStatus.REJECTED, version=2))

    assert store.commit_interest("alice", "bob", rejected, None) is None
    assert store.get_edge("alice", "bob").is_rejected()


def test_commit_interest_refuses_pending_own_edge(store):
    pending = store.commit_interest("alice", "bob", None, None)

    with pytest.raises(InvalidEdgeTransitionError):
        store.commit_interest("alice", "bob", pending, None)

    assert store.get_edge("alice", "bob").version == 1


# ============================================================================
# READS
# ============================================================================


def test_get_pair_returns_both_directions(store):
    store.upsert_edge_if_absent("alice", "bob", EdgeStatus.PENDING)
    store.upsert_edge_if_absent("bob", "alice", EdgeStatus.REJECTED)

    edge_ab, edge_ba = store.get_pair("alice", "bob")

    assert edge_ab.is_pending()
    assert edge_ba.is_rejected()
    assert store.get_pair("alice", "carol") == (None, None)


def test_read_helpers(store):
    store.upsert_edge_if_absent("alice", "bob", EdgeStatus.PENDING)
    store.upsert_edge_if_absent("bob", "alice", EdgeStatus.PENDING)
    store.upsert_edge_if_absent("alice", "carol", EdgeStatus.REJECTED)
    store.upsert_edge_if_absent("dave", "alice", EdgeStatus.PENDING)
    store.transition_pair_to_connected("alice", "bob")

    assert [e.to_user for e in store.list_edges_from("alice")] == ["bob", "carol"]
    assert [e.from_user for e in store.list_edges_to("alice")] == ["bob", "dave"]
    assert [e.to_user for e in store.list_connections("alice")] == ["bob"]
    assert [e.to_user for e in store.list_connections("bob")] == ["alice"]
    assert store.list_connections("carol") == []
    assert store.related_user_ids("alice") == {"bob", "carol", "dave"}
    assert store.related_user_ids("erin") == set()
    assert len(store.all_edges()) == 4


def test_before_operation_hook_receives_method_names():
    hook = MagicMock()
    store = InMemoryEdgeStore(before_operation=hook)

    store.upsert_edge_if_absent("alice", "bob", EdgeStatus.PENDING)
    store.get_edge("alice", "bob")
    store.get_pair("alice", "bob")
    store.commit_interest("bob", "alice", None, None)
    store.transition_pair_to_connected("alice", "bob")

    assert [c.args[0] for c in hook.call_args_list] == [
        "upsert_edge_if_absent",
        "get_edge",
        "get_pair",
        "commit_interest",
        "transition_pair_to_connected",
    ]


# ============================================================================
# USER DIRECTORY
# ============================================================================


def test_user_directory_register_and_exists():
    directory = InMemoryUserDirectory(["carol", "alice"])

    assert directory.exists("alice")
    assert not directory.exists("bob")
    assert directory.register("bob", "alice") == 1
    assert directory.all_user_ids() == ["alice", "bob", "carol"]


def test_user_directory_validates_ids():
    with pytest.raises(InvalidUserIdError):
        InMemoryUserDirectory(["ok", "not ok"])
