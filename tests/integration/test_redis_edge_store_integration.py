"""
Integration tests for RedisEdgeStore and RedisUserDirectory against a real Redis.

Requires a running Redis (docker-compose up -d redis); skipped otherwise.

Covers:
- Create-if-absent semantics and index sets
- Version-checked compare-and-set
- All-or-nothing pair transition and its CONFLICT / ALREADY_APPLIED results
- Interest commit and consistent pair reads
- Connection listing and related users
"""

import pytest

from src.domain.matching.value_objects import CommitResult, EdgeStatus
from src.infrastructure.persistence.redis import RedisEdgeStore, RedisUserDirectory


@pytest.fixture
def store(clean_redis) -> RedisEdgeStore:
    return RedisEdgeStore(clean_redis)


# ============================================================================
# UPSERT / CAS
# ============================================================================


def test_upsert_creates_once(store, clean_redis):
    edge, created = store.upsert_edge_if_absent("alice", "bob", EdgeStatus.PENDING)
    again, created_again = store.upsert_edge_if_absent("alice", "bob", EdgeStatus.REJECTED)

    assert created is True
    assert created_again is False
    assert again.status is EdgeStatus.PENDING
    assert again.version == edge.version
    assert clean_redis.smembers("edges:out:alice") == {"bob"}
    assert clean_redis.smembers("edges:in:bob") == {"alice"}


def test_get_edge_round_trip(store):
    edge, _ = store.upsert_edge_if_absent("alice", "bob", EdgeStatus.REJECTED)

    loaded = store.get_edge("alice", "bob")

    assert loaded == edge
    assert store.get_edge("bob", "alice") is None


def test_compare_and_set_checks_version(store):
    edge, _ = store.upsert_edge_if_absent("alice", "bob", EdgeStatus.PENDING)

    updated = store.compare_and_set_status(edge, EdgeStatus.REJECTED)
    stale = store.compare_and_set_status(edge, EdgeStatus.PENDING)

    assert updated is not None
    assert updated.version == edge.version + 1
    assert stale is None
    assert store.get_edge("alice", "bob").status is EdgeStatus.REJECTED


# ============================================================================
# PAIR TRANSITION
# ============================================================================


def test_transition_connects_both_edges(store):
    store.upsert_edge_if_absent("alice", "bob", EdgeStatus.PENDING)
    store.upsert_edge_if_absent("bob", "alice", EdgeStatus.PENDING)

    assert store.transition_pair_to_connected("alice", "bob") is CommitResult.APPLIED
    assert store.transition_pair_to_connected("bob", "alice") is CommitResult.ALREADY_APPLIED

    assert store.get_edge("alice", "bob").status is EdgeStatus.CONNECTED
    assert store.get_edge("bob", "alice").status is EdgeStatus.CONNECTED
    assert [e.to_user for e in store.list_connections("alice")] == ["bob"]
    assert [e.to_user for e in store.list_connections("bob")] == ["alice"]


def test_transition_conflicts_without_reciprocal_pending(store):
    store.upsert_edge_if_absent("alice", "bob", EdgeStatus.PENDING)

    assert store.transition_pair_to_connected("alice", "bob") is CommitResult.CONFLICT

    store.upsert_edge_if_absent("bob", "alice", EdgeStatus.REJECTED)

    assert store.transition_pair_to_connected("alice", "bob") is CommitResult.CONFLICT
    assert store.get_edge("alice", "bob").status is EdgeStatus.PENDING
    assert store.list_connections("alice") == []


# ============================================================================
# INTEREST COMMIT
# ============================================================================


def test_commit_interest_creates_then_connects(store, clean_redis):
    first = store.commit_interest("alice", "bob", None, None)
    own, reciprocal = store.get_pair("bob", "alice")

    second = store.commit_interest("bob", "alice", own, reciprocal)

    assert first.status is EdgeStatus.PENDING
    assert second.status is EdgeStatus.CONNECTED
    edge_ab, edge_ba = store.get_pair("alice", "bob")
    assert edge_ab.status is EdgeStatus.CONNECTED
    assert edge_ab.version == 2
    assert edge_ba.status is EdgeStatus.CONNECTED
    assert edge_ba.version == 1
    assert clean_redis.smembers("edges:out:bob") == {"alice"}
    assert [e.to_user for e in store.list_connections("alice")] == ["bob"]


def test_commit_interest_on_stale_snapshot_writes_nothing(store):
    store.commit_interest("bob", "alice", None, None)

    assert store.commit_interest("alice", "bob", None, None) is None
    edge_ab, edge_ba = store.get_pair("alice", "bob")
    assert edge_ab is None
    assert edge_ba.status is EdgeStatus.PENDING
    assert store.list_edges_from("alice") == []


# ============================================================================
# READS
# ============================================================================


def test_list_edges_and_related_users(store):
    store.upsert_edge_if_absent("alice", "bob", EdgeStatus.PENDING)
    store.upsert_edge_if_absent("alice", "carol", EdgeStatus.REJECTED)
    store.upsert_edge_if_absent("dave", "alice", EdgeStatus.PENDING)

    assert [e.to_user for e in store.list_edges_from("alice")] == ["bob", "carol"]
    assert [e.from_user for e in store.list_edges_to("alice")] == ["dave"]
    assert store.related_user_ids("alice") == {"bob", "carol", "dave"}
    assert store.related_user_ids("erin") == set()


def test_key_prefix_isolates_namespaces(clean_redis):
    tenant_a = RedisEdgeStore(clean_redis, key_prefix="a")
    tenant_b = RedisEdgeStore(clean_redis, key_prefix="b")

    tenant_a.upsert_edge_if_absent("alice", "bob", EdgeStatus.PENDING)

    assert tenant_b.get_edge("alice", "bob") is None
    assert clean_redis.exists("a:edge:alice:bob") == 1


def test_user_directory(clean_redis):
    directory = RedisUserDirectory(clean_redis)

    assert directory.register("carol", "alice", "bob") == 3
    assert directory.register("alice") == 0
    assert directory.exists("alice") is True
    assert directory.exists("ghost") is False
    assert directory.all_user_ids() == ["alice", "bob", "carol"]
