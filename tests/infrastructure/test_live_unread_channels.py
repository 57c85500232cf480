"""Tests for websocket publishing of unread state."""

import asyncio

from townhall.domain.entities import (
    NotificationContent,
    NotificationRecord,
    UnreadIndicatorState,
    UnreadSnapshot,
)
from townhall.infrastructure.notifications import (
    LiveUnreadChannels,
    NotificationConnectionManager,
    NotificationPublisher,
    build_unread_message,
    serialize_notification,
)
from townhall.utils import now_in_app_timezone


def _record(notification_id, user_id="alice"):
    return NotificationRecord(
        id=notification_id,
        user_id=user_id,
        community_id="community-1",
        post_id="post-9",
        content=NotificationContent(
            title="Fire drill",
            body="At noon",
            source_id="post-9",
            source_category_tag="disasterAndFire",
        ),
        created_at=now_in_app_timezone(),
    )


class RecordingPublisher:
    def __init__(self):
        self.messages = []
        self.targets = []

    def dispatch_state(self, state):
        self.messages.append(build_unread_message(state)["data"])
        self.targets.append(None)

    def dispatch_state_to(self, state, websocket):
        self.messages.append(build_unread_message(state)["data"])
        self.targets.append(websocket)


class FakeSubscription:
    def __init__(self):
        self.released = False

    def unsubscribe(self):
        self.released = True


class FakeWebSocket:
    def __init__(self, fail=False):
        self.sent = []
        self.fail = fail

    async def accept(self):
        return None

    async def send_json(self, message):
        if self.fail:
            raise RuntimeError("socket closed")
        self.sent.append(message)


def test_serialize_notification_uses_document_field_names():
    record = _record("n1")

    document = serialize_notification(record)

    assert document["userId"] == "alice"
    assert document["communityId"] == "community-1"
    assert document["postId"] == "post-9"
    assert document["content"]["title"] == "Fire drill"
    assert document["content"]["body"] == "At noon"
    assert document["status"] == {"read": False, "delivered": True, "deliveredAt": None}
    assert document["createdAt"] == record.created_at.isoformat()


def test_first_attach_subscribes_and_later_attaches_reuse_channel():
    publisher = RecordingPublisher()
    subscriptions = []

    def subscribe(user_id, observer):
        observer(UnreadSnapshot("alice", (_record("n1"),)))
        subscription = FakeSubscription()
        subscriptions.append(subscription)
        return subscription

    channels = LiveUnreadChannels(publisher, subscribe)

    first_socket, second_socket = object(), object()

    first = channels.attach("alice", first_socket)
    second = channels.attach("alice", second_socket)

    assert first is second
    assert len(subscriptions) == 1
    assert [message["count"] for message in publisher.messages] == [1, 1]
    assert publisher.targets == [None, second_socket]
    assert publisher.messages[0]["phase"] == "confirmed"

    channels.release("alice")

    assert subscriptions[0].released is True
    assert channels.is_attached("alice") is False


def test_push_sends_optimistic_state():
    publisher = RecordingPublisher()
    channels = LiveUnreadChannels(
        publisher,
        lambda user_id, observer: observer(
            UnreadSnapshot("alice", (_record("n1"), _record("n2")))
        )
        or FakeSubscription(),
    )
    state = channels.attach("alice")

    state.mark_read(["n1"])
    channels.push("alice")
    channels.push("bob")

    latest = publisher.messages[-1]
    assert latest["phase"] == "optimistic"
    assert latest["count"] == 1
    assert [n["id"] for n in latest["notifications"]] == ["n2"]
    assert len(publisher.messages) == 2


def test_publisher_delivers_on_the_connection_loop():
    manager = NotificationConnectionManager()
    publisher = NotificationPublisher(manager)
    healthy = FakeWebSocket()
    broken = FakeWebSocket(fail=True)
    state = UnreadIndicatorState("alice")
    state.apply_snapshot(UnreadSnapshot("alice", (_record("n1"),)))

    async def scenario():
        await manager.connect("alice", healthy)
        await manager.connect("alice", broken)
        publisher.dispatch_state(state)
        for _ in range(5):
            await asyncio.sleep(0)

    asyncio.run(scenario())

    assert healthy.sent == [build_unread_message(state)]
    assert healthy.sent[0]["type"] == "unread"
    assert manager.connection_count("alice") == 1


def test_publisher_ignores_anonymous_state():
    manager = NotificationConnectionManager()
    NotificationPublisher(manager).dispatch_state(UnreadIndicatorState(None))

    assert manager.connection_count("alice") == 0


def test_attach_while_loading_waits_for_first_snapshot():
    publisher = RecordingPublisher()
    observers = []

    def subscribe(user_id, observer):
        observers.append(observer)
        return FakeSubscription()

    channels = LiveUnreadChannels(publisher, subscribe)
    channels.attach("alice", object())
    channels.attach("alice", object())

    assert publisher.messages == []

    observers[0](UnreadSnapshot("alice", (_record("n1"),)))

    assert publisher.targets == [None]
    assert publisher.messages[0]["count"] == 1


def test_targeted_dispatch_reaches_only_the_given_connection():
    manager = NotificationConnectionManager()
    publisher = NotificationPublisher(manager)
    existing = FakeWebSocket()
    joining = FakeWebSocket()
    state = UnreadIndicatorState("alice")
    state.apply_snapshot(UnreadSnapshot("alice", (_record("n1"),)))

    async def scenario():
        await manager.connect("alice", existing)
        await manager.connect("alice", joining)
        publisher.dispatch_state_to(state, joining)
        for _ in range(5):
            await asyncio.sleep(0)

    asyncio.run(scenario())

    assert existing.sent == []
    assert joining.sent == [build_unread_message(state)]
