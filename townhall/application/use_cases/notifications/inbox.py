"""Use cases for browsing and clearing a user's notifications."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy.orm import Session

from townhall.domain.entities import NotificationRecord
from townhall.infrastructure.notifications import NotificationChangeFeed
from townhall.infrastructure.repositories import MembershipRepository, NotificationRepository

logger = logging.getLogger(__name__)


def list_user_notifications(
    session: Session, *, user_id: str, limit: int | None = 50
) -> Sequence[NotificationRecord]:
    """Return the notifications of ``user_id``, newest first."""

    return NotificationRepository(session).list_for_user(user_id, limit=limit)


def get_user_notification(
    session: Session, *, notification_id: str, user_id: str
) -> NotificationRecord | None:
    """Return the notification only when it belongs to ``user_id``."""

    notification = NotificationRepository(session).get(notification_id)
    if notification is None or notification.user_id != user_id:
        return None
    return notification


def get_unread_notification_count(session: Session, *, user_id: str) -> int:
    return NotificationRepository(session).count_unread(user_id)


def delete_notification(
    session: Session,
    *,
    notification_id: str,
    user_id: str,
    change_feed: NotificationChangeFeed | None = None,
) -> bool:
    """Delete one notification of ``user_id``; ``False`` when it does not exist."""

    return NotificationRepository(session, change_feed).delete(notification_id, user_id=user_id)


def delete_all_notifications_for_user(
    session: Session,
    *,
    user_id: str,
    change_feed: NotificationChangeFeed | None = None,
) -> int:
    deleted = NotificationRepository(session, change_feed).delete_all_for_user(user_id)
    logger.info("Deleted %d notifications for user %s", deleted, user_id)
    return deleted


def list_community_recipients(
    session: Session, *, community_id: str, exclude_user_id: str | None = None
) -> list[str]:
    """Return active members of ``community_id`` except ``exclude_user_id``."""

    member_ids = MembershipRepository(session).list_active_member_ids(community_id)
    return [user_id for user_id in member_ids if user_id and user_id != exclude_user_id]


__all__ = [
    "delete_all_notifications_for_user",
    "delete_notification",
    "get_unread_notification_count",
    "get_user_notification",
    "list_community_recipients",
    "list_user_notifications",
]
