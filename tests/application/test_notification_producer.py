"""Tests for the notification fan-out producer."""

import logging

import pytest

from townhall.application.use_cases.notifications import NotificationProducer
from townhall.domain.entities import (
    EMERGENCY_CATEGORY_TAG,
    EMERGENCY_PRIORITY,
    NOTIFICATION_TYPE_POST_CREATED,
    NotificationEvent,
    NotificationPreferences,
)
from townhall.domain.errors import NotificationDeliveryError, NotificationValidationError
from townhall.infrastructure.models import NotificationModel
from townhall.infrastructure.repositories import NotificationRepository


def _event(*, user_ids=("alice",), category_tag="communityEvents", **overrides):
    values = {
        "community_id": "community-1",
        "post_id": "post-42",
        "title": "Block party",
        "body": "Saturday on Elm St",
        "category_tag": category_tag,
        "user_ids": list(user_ids),
    }
    values.update(overrides)
    return NotificationEvent(**values)


@pytest.fixture()
def producer(session_factory, change_feed):
    return NotificationProducer(session_factory, change_feed)


@pytest.fixture()
def members(add_member):
    """Register alice, bob and carol in community-1 without stored preferences."""

    for user_id in ("alice", "bob", "carol"):
        add_member(user_id)


def test_fan_out_creates_one_unread_record_per_recipient(producer, session, members):
    """Each recipient receives one unread record sharing a single timestamp."""

    saved = producer.create_for_community(_event(user_ids=["alice", "bob", "carol"]))

    assert sorted(record.user_id for record in saved) == ["alice", "bob", "carol"]
    stored = [
        record
        for user_id in ("alice", "bob", "carol")
        for record in NotificationRepository(session).list_for_user(user_id)
    ]
    assert len(stored) == 3
    assert {record.created_at for record in stored} == {saved[0].created_at}
    for record in stored:
        assert record.status.read is False
        assert record.status.delivered is True
        assert record.type == NOTIFICATION_TYPE_POST_CREATED
        assert record.content.title == "Block party"
        assert record.content.body == "Saturday on Elm St"
        assert record.content.source_id == "post-42"
        assert record.community_id == "community-1"


def test_duplicate_recipients_receive_a_single_notification(producer, session, members):
    producer.create_for_community(_event(user_ids=["alice", "alice", "bob"]))

    assert NotificationRepository(session).count_unread("alice") == 1
    assert NotificationRepository(session).count_unread("bob") == 1


def test_empty_recipient_list_is_rejected_before_writing(producer, session):
    with pytest.raises(NotificationValidationError):
        producer.create_for_community(_event(user_ids=[]))

    assert session.query(NotificationModel).count() == 0


@pytest.mark.parametrize(
    "overrides",
    [
        {"post_id": ""},
        {"title": "   "},
        {"community_id": ""},
        {"category_tag": ""},
        {"body": None},
        {"user_ids": ["alice", " "]},
    ],
)
def test_invalid_events_are_rejected(producer, session, members, overrides):
    with pytest.raises(NotificationValidationError):
        producer.create_for_community(_event(**overrides))

    assert session.query(NotificationModel).count() == 0


def test_non_members_are_skipped(producer, session, add_member):
    """Only users holding a membership in the community are notified."""

    add_member("alice")
    add_member("stranger", community_id="community-2")

    saved = producer.create_for_community(_event(user_ids=["alice", "stranger", "ghost"]))

    assert [record.user_id for record in saved] == ["alice"]
    assert NotificationRepository(session).count_unread("stranger") == 0
    assert NotificationRepository(session).count_unread("ghost") == 0


def test_members_who_opted_out_are_skipped(producer, session, add_member):
    """Stored preferences filter recipients; members without preferences stay opted in."""

    add_member("alice", preferences=NotificationPreferences(communityEvents=False))
    add_member("bob")
    add_member("carol", preferences=NotificationPreferences(businesses=False))

    saved = producer.create_for_community(_event(user_ids=["alice", "bob", "carol"]))

    assert sorted(record.user_id for record in saved) == ["bob", "carol"]
    assert NotificationRepository(session).count_unread("alice") == 0


def test_emergency_alerts_reach_members_who_opted_out(producer, add_member):
    add_member(
        "alice",
        preferences=NotificationPreferences(emergencyAlerts=False, communityEvents=False),
    )

    saved = producer.create_for_community(_event(category_tag=EMERGENCY_CATEGORY_TAG))

    assert [record.user_id for record in saved] == ["alice"]
    assert saved[0].priority == EMERGENCY_PRIORITY


def test_everyone_opted_out_creates_nothing(producer, session, add_member):
    add_member("alice", preferences=NotificationPreferences(businesses=False))

    saved = producer.create_for_community(_event(category_tag="businesses"))

    assert saved == []
    assert session.query(NotificationModel).count() == 0


def test_store_failure_raises_delivery_error(producer, engine, members, caplog):
    """A failed batch surfaces as a delivery error and is logged."""

    NotificationModel.__table__.drop(engine)

    with caplog.at_level(logging.ERROR):
        with pytest.raises(NotificationDeliveryError):
            producer.create_for_community(_event(user_ids=["alice", "bob"]))

    assert "Failed to create notifications for post post-42" in caplog.text


def test_fan_out_announces_each_recipient(producer, change_feed, members):
    notified = []
    change_feed.register("alice", notified.append)
    change_feed.register("bob", notified.append)

    producer.create_for_community(_event(user_ids=["alice", "bob", "alice"]))

    assert notified == ["alice", "bob"]
