"""Connection management helpers for notification websockets."""

from __future__ import annotations

import asyncio
import logging
import threading
from collections import defaultdict
from typing import Any, DefaultDict

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class NotificationConnectionManager:
    """Manage active websocket connections grouped by user.

    Each connection remembers the event loop it was accepted on so messages
    produced on worker threads can be handed back to that loop.
    """

    def __init__(self) -> None:
        self._connections: DefaultDict[str, dict[WebSocket, asyncio.AbstractEventLoop]] = (
            defaultdict(dict)
        )
        self._lock = threading.Lock()

    async def connect(self, user_id: str, websocket: WebSocket) -> None:
        """Accept the websocket connection and register it for ``user_id``."""

        await websocket.accept()
        loop = asyncio.get_running_loop()
        with self._lock:
            self._connections[user_id][websocket] = loop

    def disconnect(self, user_id: str, websocket: WebSocket) -> None:
        """Remove ``websocket`` from the pool for ``user_id``."""

        with self._lock:
            connections = self._connections.get(user_id)
            if connections is None:
                return
            connections.pop(websocket, None)
            if not connections:
                self._connections.pop(user_id, None)

    def connection_count(self, user_id: str) -> int:
        with self._lock:
            return len(self._connections.get(user_id, {}))

    def connections_for(
        self, user_id: str
    ) -> list[tuple[WebSocket, asyncio.AbstractEventLoop]]:
        with self._lock:
            return list(self._connections.get(user_id, {}).items())

    async def send(self, user_id: str, websocket: WebSocket, message: dict[str, Any]) -> None:
        """Send ``message`` to one connection, dropping it when the send fails."""

        try:
            await websocket.send_json(message)
        except Exception:
            logger.warning("Dropping notification websocket for user %s after a failed send", user_id)
            self.disconnect(user_id, websocket)


__all__ = ["NotificationConnectionManager"]
