"""Utility helpers to push unread notification state to websocket subscribers."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from fastapi import WebSocket

from townhall.domain.entities import NotificationRecord, UnreadIndicatorState
from townhall.utils import isoformat_or_none

from .manager import NotificationConnectionManager

logger = logging.getLogger(__name__)

UNREAD_MESSAGE_TYPE = "unread"


class NotificationPublisher:
    """Serialize unread state and schedule its delivery."""

    def __init__(self, manager: NotificationConnectionManager) -> None:
        self._manager = manager

    def dispatch_state(self, state: UnreadIndicatorState) -> None:
        """Schedule ``state`` to be delivered to every connection of its recipient."""

        if not state.recipient_id:
            return
        message = build_unread_message(state)
        self._schedule_send(
            state.recipient_id, message, self._manager.connections_for(state.recipient_id)
        )

    def dispatch_state_to(self, state: UnreadIndicatorState, websocket: WebSocket) -> None:
        """Schedule ``state`` to be delivered to ``websocket`` only."""

        if not state.recipient_id:
            return
        targets = [
            (connection, loop)
            for connection, loop in self._manager.connections_for(state.recipient_id)
            if connection is websocket
        ]
        self._schedule_send(state.recipient_id, build_unread_message(state), targets)

    def _schedule_send(
        self,
        user_id: str,
        message: dict[str, Any],
        targets: list[tuple[WebSocket, asyncio.AbstractEventLoop]],
    ) -> None:
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None

        for websocket, loop in targets:
            coroutine = self._manager.send(user_id, websocket, dict(message))
            if loop is running:
                loop.create_task(coroutine)
                continue
            try:
                asyncio.run_coroutine_threadsafe(coroutine, loop)
            except RuntimeError:
                coroutine.close()
                logger.warning("Event loop for user %s is closed; dropping connection", user_id)
                self._manager.disconnect(user_id, websocket)


def serialize_notification(notification: NotificationRecord) -> dict[str, Any]:
    """Return the document representation of ``notification``."""

    return {
        "id": notification.id,
        "userId": notification.user_id,
        "communityId": notification.community_id,
        "postId": notification.post_id,
        "type": notification.type,
        "priority": notification.priority,
        "content": {
            "title": notification.content.title,
            "body": notification.content.body,
            "sourceId": notification.content.source_id,
            "sourceCategoryTag": notification.content.source_category_tag,
        },
        "createdAt": isoformat_or_none(notification.created_at),
        "status": {
            "read": notification.status.read,
            "delivered": notification.status.delivered,
            "deliveredAt": isoformat_or_none(notification.status.delivered_at),
        },
    }


def serialize_unread_state(state: UnreadIndicatorState) -> dict[str, Any]:
    """Return the websocket payload describing ``state``."""

    phase, visible = state.view()
    return {
        "hasUnread": bool(visible),
        "count": len(visible),
        "phase": phase,
        "notifications": [serialize_notification(n) for n in visible],
    }


def build_unread_message(state: UnreadIndicatorState) -> dict[str, Any]:
    return {"type": UNREAD_MESSAGE_TYPE, "data": serialize_unread_state(state)}


__all__ = [
    "NotificationPublisher",
    "UNREAD_MESSAGE_TYPE",
    "build_unread_message",
    "serialize_notification",
    "serialize_unread_state",
]
