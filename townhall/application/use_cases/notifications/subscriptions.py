"""Live subscriptions over a recipient's unread notifications."""

from __future__ import annotations

import logging
import threading
from typing import Callable

from sqlalchemy.orm import Session, sessionmaker

from townhall.domain.entities import UnreadSnapshot
from townhall.infrastructure.notifications import NotificationChangeFeed
from townhall.infrastructure.repositories import NotificationRepository

logger = logging.getLogger(__name__)

UnreadObserver = Callable[[UnreadSnapshot], None]


class Subscription:
    """Handle returned by :meth:`UnreadSubscriptionService.subscribe`.

    The owner must call :meth:`unsubscribe` (or use the handle as a context
    manager) once it stops observing; the registration is never released
    implicitly.
    """

    def __init__(
        self,
        recipient_id: str | None,
        *,
        refresh: Callable[[], None] | None = None,
        release: Callable[[], None] | None = None,
    ) -> None:
        self.recipient_id = recipient_id
        self._refresh = refresh
        self._release = release
        self._active = release is not None

    @property
    def active(self) -> bool:
        return self._active

    def refresh(self) -> None:
        """Re-deliver the current unread set to the observer."""

        if self._active and self._refresh is not None:
            self._refresh()

    def unsubscribe(self) -> None:
        """Release the registration. Calling it again is a no-op."""

        if not self._active:
            return
        self._active = False
        if self._release is not None:
            self._release()

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.unsubscribe()


class UnreadSubscriptionService:
    """Open live views of the unread notifications of a recipient."""

    def __init__(
        self, session_factory: sessionmaker[Session], change_feed: NotificationChangeFeed
    ) -> None:
        self._session_factory = session_factory
        self._change_feed = change_feed

    def fetch_unread(self, recipient_id: str) -> UnreadSnapshot:
        """Query the current unread set of ``recipient_id``."""

        with self._session_factory() as session:
            notifications = NotificationRepository(session).list_unread_for_user(recipient_id)
        return UnreadSnapshot(recipient_id=recipient_id, notifications=tuple(notifications))

    def subscribe(self, recipient_id: str | None, observer: UnreadObserver) -> Subscription:
        """Deliver the unread set of ``recipient_id`` now and after every change.

        Without a recipient nothing is registered: ``observer`` immediately
        receives an empty snapshot and the returned handle is already closed.
        """

        if not recipient_id:
            observer(UnreadSnapshot.empty())
            return Subscription(None)

        lock = threading.RLock()
        state = {"active": True}

        def deliver() -> None:
            # Serialized so a slower query cannot overwrite a newer snapshot.
            with lock:
                if not state["active"]:
                    return
                try:
                    snapshot = self.fetch_unread(recipient_id)
                except Exception:
                    logger.exception(
                        "Error fetching unread notifications for user %s", recipient_id
                    )
                    snapshot = UnreadSnapshot.empty(recipient_id)
                observer(snapshot)

        token = self._change_feed.register(recipient_id, lambda _user_id: deliver())

        def release() -> None:
            with lock:
                state["active"] = False
            self._change_feed.unregister(recipient_id, token)
            logger.debug("Released unread subscription for user %s", recipient_id)

        subscription = Subscription(recipient_id, refresh=deliver, release=release)
        deliver()
        return subscription


__all__ = ["Subscription", "UnreadObserver", "UnreadSubscriptionService"]
