"""Tests for the two-phase unread indicator state."""

import threading

from townhall.domain.entities import (
    PHASE_CONFIRMED,
    PHASE_LOADING,
    PHASE_OPTIMISTIC,
    NotificationContent,
    NotificationRecord,
    UnreadIndicatorState,
    UnreadSnapshot,
)


def _record(notification_id: str) -> NotificationRecord:
    return NotificationRecord(
        id=notification_id,
        user_id="alice",
        community_id="community-1",
        post_id="post-1",
        content=NotificationContent(
            title="Title",
            body="Body",
            source_id="post-1",
            source_category_tag="generalDiscussion",
        ),
    )


def _snapshot(*ids: str) -> UnreadSnapshot:
    return UnreadSnapshot(recipient_id="alice", notifications=tuple(_record(i) for i in ids))


def test_indicator_hidden_until_first_snapshot():
    """Before any delivery the indicator is loading, not "zero unread"."""

    state = UnreadIndicatorState("alice")

    assert state.phase == PHASE_LOADING
    assert state.has_unread is False
    assert state.visible == ()
    assert state.mark_all_read() == frozenset()


def test_snapshot_drives_confirmed_phase():
    state = UnreadIndicatorState("alice")

    state.apply_snapshot(_snapshot("n1", "n2"))

    assert state.phase == PHASE_CONFIRMED
    assert state.count == 2
    assert state.has_unread is True


def test_mark_read_hides_ids_until_snapshot_confirms():
    """Optimistic reads disappear immediately and are dropped once confirmed."""

    state = UnreadIndicatorState("alice")
    state.apply_snapshot(_snapshot("n1", "n2"))

    applied = state.mark_read(["n1", ""])

    assert applied == frozenset({"n1"})
    assert state.phase == PHASE_OPTIMISTIC
    assert [n.id for n in state.visible] == ["n2"]

    state.apply_snapshot(_snapshot("n2"))

    assert state.phase == PHASE_CONFIRMED
    assert state.optimistic_ids == frozenset()
    assert state.count == 1


def test_settle_reverts_to_snapshot_after_failed_write():
    """When the write fails the last confirmed snapshot wins again."""

    state = UnreadIndicatorState("alice")
    state.apply_snapshot(_snapshot("n1", "n2"))
    applied = state.mark_all_read()

    assert state.has_unread is False

    state.settle(applied)

    assert state.phase == PHASE_CONFIRMED
    assert state.count == 2


def test_snapshot_still_listing_optimistic_id_keeps_it_hidden():
    state = UnreadIndicatorState("alice")
    state.apply_snapshot(_snapshot("n1", "n2"))
    state.mark_read(["n1"])

    state.apply_snapshot(_snapshot("n1", "n2", "n3"))

    assert state.phase == PHASE_OPTIMISTIC
    assert [n.id for n in state.visible] == ["n2", "n3"]


def test_concurrent_marks_and_snapshots_keep_every_hidden_id():
    """Snapshots applied from another thread never drop a concurrent optimistic read."""

    ids = [f"n{i}" for i in range(500)]
    snapshot = _snapshot(*ids)
    state = UnreadIndicatorState("alice")
    state.apply_snapshot(snapshot)
    barrier = threading.Barrier(2)

    def mark_each():
        barrier.wait()
        for notification_id in ids:
            state.mark_read([notification_id])

    def apply_repeatedly():
        barrier.wait()
        for _ in ids:
            state.apply_snapshot(snapshot)

    threads = [threading.Thread(target=mark_each), threading.Thread(target=apply_repeatedly)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert state.optimistic_ids == frozenset(ids)
    assert state.view() == (PHASE_OPTIMISTIC, ())
