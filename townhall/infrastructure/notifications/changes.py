"""In-process change feed for committed notification writes."""

from __future__ import annotations

import itertools
import logging
import threading
from collections import defaultdict
from typing import Callable, DefaultDict, Iterable

logger = logging.getLogger(__name__)

ChangeListener = Callable[[str], None]


class NotificationChangeFeed:
    """Fan committed changes out to listeners registered per recipient.

    Writers call :meth:`publish` after their transaction commits. Listeners are
    invoked synchronously on the writer's thread, outside the registry lock.
    """

    def __init__(self) -> None:
        self._listeners: DefaultDict[str, dict[int, ChangeListener]] = defaultdict(dict)
        self._tokens = itertools.count(1)
        self._lock = threading.Lock()

    def register(self, user_id: str, listener: ChangeListener) -> int:
        """Register ``listener`` for ``user_id`` and return its token."""

        with self._lock:
            token = next(self._tokens)
            self._listeners[user_id][token] = listener
        return token

    def unregister(self, user_id: str, token: int) -> bool:
        """Remove the listener registered under ``token``."""

        with self._lock:
            listeners = self._listeners.get(user_id)
            if listeners is None or token not in listeners:
                return False
            del listeners[token]
            if not listeners:
                self._listeners.pop(user_id, None)
        return True

    def publish(self, user_ids: Iterable[str]) -> None:
        """Notify listeners of every distinct recipient in ``user_ids``."""

        seen: set[str] = set()
        for user_id in user_ids:
            if not user_id or user_id in seen:
                continue
            seen.add(user_id)
            with self._lock:
                listeners = list(self._listeners.get(user_id, {}).values())
            for listener in listeners:
                try:
                    listener(user_id)
                except Exception:
                    logger.exception("Notification change listener failed for user %s", user_id)

    def listener_count(self, user_id: str | None = None) -> int:
        """Return the number of active listeners, optionally for one user."""

        with self._lock:
            if user_id is not None:
                return len(self._listeners.get(user_id, {}))
            return sum(len(listeners) for listeners in self._listeners.values())


__all__ = ["ChangeListener", "NotificationChangeFeed"]
