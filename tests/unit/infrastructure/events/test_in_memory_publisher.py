"""
Tests for InMemoryMatchEventPublisher.

Covers:
- One event per pair regardless of argument order
- Duplicate suppression counter
- events_for() filtering
"""

from datetime import datetime, timezone

from src.infrastructure.events import InMemoryMatchEventPublisher

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


def test_publish_records_event():
    publisher = InMemoryMatchEventPublisher(clock=lambda: NOW)

    publisher.publish_match("bob", "alice")

    [event] = publisher.events
    assert event.event_id == "match:alice|bob"
    assert event.matched_at == NOW


def test_duplicate_publish_is_suppressed():
    publisher = InMemoryMatchEventPublisher()

    publisher.publish_match("alice", "bob")
    publisher.publish_match("bob", "alice")

    assert len(publisher.events) == 1
    assert publisher.duplicates_suppressed == 1


def test_events_for_user():
    publisher = InMemoryMatchEventPublisher()
    publisher.publish_match("alice", "bob")
    publisher.publish_match("carol", "dave")

    assert [e.event_id for e in publisher.events_for("dave")] == ["match:carol|dave"]
    assert publisher.events_for("erin") == []
