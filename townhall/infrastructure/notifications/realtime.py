"""Per-user live unread channels shared by a user's websocket connections."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Protocol

from townhall.domain.entities import UnreadIndicatorState, UnreadSnapshot

from .publisher import NotificationPublisher

logger = logging.getLogger(__name__)


class SubscriptionHandle(Protocol):
    def unsubscribe(self) -> None: ...


SubscribeFunc = Callable[[str, Callable[[UnreadSnapshot], None]], SubscriptionHandle]


@dataclass
class _Channel:
    state: UnreadIndicatorState
    subscription: Any = None


class LiveUnreadChannels:
    """Keep one unread subscription per connected user.

    The subscription is opened when the user's first connection attaches and
    must be released by the owner when the last one goes away.
    """

    def __init__(self, publisher: NotificationPublisher, subscribe: SubscribeFunc) -> None:
        self._publisher = publisher
        self._subscribe = subscribe
        self._channels: dict[str, _Channel] = {}
        self._lock = threading.Lock()

    def attach(self, user_id: str, websocket: Any = None) -> UnreadIndicatorState:
        """Return the indicator state of ``user_id``, subscribing on first use.

        A later connection gets the current state sent to ``websocket`` alone;
        the user's other connections already hold it.
        """

        with self._lock:
            channel = self._channels.get(user_id)
            created = channel is None
            if channel is None:
                channel = _Channel(state=UnreadIndicatorState(user_id))
                self._channels[user_id] = channel

        if not created:
            # Still loading: the first snapshot reaches every connection.
            if websocket is not None and channel.state.confirmed is not None:
                self._publisher.dispatch_state_to(channel.state, websocket)
            return channel.state

        channel.subscription = self._subscribe(
            user_id, lambda snapshot: self._deliver(channel, snapshot)
        )
        logger.debug("Opened live unread channel for user %s", user_id)
        return channel.state

    def push(self, user_id: str) -> None:
        """Send the current (possibly optimistic) state of ``user_id``."""

        with self._lock:
            channel = self._channels.get(user_id)
        if channel is not None:
            self._publisher.dispatch_state(channel.state)

    def release(self, user_id: str) -> None:
        """Close the channel of ``user_id`` and release its subscription."""

        with self._lock:
            channel = self._channels.pop(user_id, None)
        if channel is None:
            return
        if channel.subscription is not None:
            channel.subscription.unsubscribe()
        logger.debug("Released live unread channel for user %s", user_id)

    def is_attached(self, user_id: str) -> bool:
        with self._lock:
            return user_id in self._channels

    def _deliver(self, channel: _Channel, snapshot: UnreadSnapshot) -> None:
        channel.state.apply_snapshot(snapshot)
        self._publisher.dispatch_state(channel.state)


__all__ = ["LiveUnreadChannels", "SubscribeFunc", "SubscriptionHandle"]
