"""Reconcile the read state of a recipient's notifications."""

from __future__ import annotations

import logging
from typing import Iterable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from townhall.infrastructure.notifications import NotificationChangeFeed
from townhall.infrastructure.repositories import NotificationRepository

logger = logging.getLogger(__name__)


class ReadStateReconciler:
    """Mark notifications as read (or unread) on behalf of a recipient.

    Failures are logged and reported as ``False``; callers keep their
    optimistic state until the next live delivery corrects it.
    """

    def __init__(
        self, session_factory: sessionmaker[Session], change_feed: NotificationChangeFeed
    ) -> None:
        self._session_factory = session_factory
        self._change_feed = change_feed

    def mark_one(self, notification_id: str, *, read: bool = True) -> bool:
        """Set ``status.read`` on one notification.

        Missing records and records already in the requested state are
        treated as success.
        """

        if not notification_id:
            logger.warning("mark_one called without a notification id")
            return False
        try:
            with self._session_factory() as session:
                record = NotificationRepository(session, self._change_feed).set_read(
                    notification_id, read=read
                )
        except SQLAlchemyError:
            logger.error(
                "Error marking notification %s as %s",
                notification_id,
                "read" if read else "unread",
                exc_info=True,
            )
            return False
        if record is None:
            logger.debug("Notification %s not found; nothing to mark", notification_id)
        return True

    def mark_many(
        self, notification_ids: Iterable[str], *, recipient_id: str, read: bool = True
    ) -> bool:
        """Set ``status.read`` on the listed notifications owned by ``recipient_id``."""

        ids = [notification_id for notification_id in notification_ids if notification_id]
        if not recipient_id:
            return False
        if not ids:
            return True
        try:
            with self._session_factory() as session:
                NotificationRepository(session, self._change_feed).set_read_many(
                    ids, user_id=recipient_id, read=read
                )
        except SQLAlchemyError:
            logger.error(
                "Error marking %d notifications for user %s", len(ids), recipient_id,
                exc_info=True,
            )
            return False
        return True

    def mark_all(self, recipient_id: str | None, *, read: bool = True) -> bool:
        """Flip every notification of ``recipient_id`` currently in the opposite state.

        The matching ids are read first and updated in a second step, so
        notifications created in between are not included.
        """

        if not recipient_id:
            logger.debug("mark_all called without a recipient; ignoring")
            return False
        try:
            with self._session_factory() as session:
                repository = NotificationRepository(session, self._change_feed)
                ids = repository.list_ids_with_read_state(recipient_id, read=not read)
                if not ids:
                    return True
                updated = repository.set_read_many(ids, user_id=recipient_id, read=read)
        except SQLAlchemyError:
            logger.error(
                "Error marking all notifications for user %s as %s",
                recipient_id,
                "read" if read else "unread",
                exc_info=True,
            )
            return False
        logger.info(
            "Marked %d notifications as %s for user %s",
            updated,
            "read" if read else "unread",
            recipient_id,
        )
        return True


__all__ = ["ReadStateReconciler"]
