"""Client-facing unread indicator with optimistic read transitions."""

from __future__ import annotations

import threading
from typing import Iterable

from .notification import NotificationRecord
from .unread_snapshot import UnreadSnapshot

PHASE_LOADING = "loading"
PHASE_OPTIMISTIC = "optimistic"
PHASE_CONFIRMED = "confirmed"


class UnreadIndicatorState:
    """Two-phase view of one recipient's unread notifications.

    ``confirmed`` is the last snapshot delivered by the live subscription and
    stays ``None`` until the first delivery. Read transitions requested locally
    are applied optimistically and hidden from :attr:`visible` until a snapshot
    confirms them or the write settles, at which point the snapshot wins.

    Snapshots arrive on the thread that committed the change while read
    transitions come from the connection's event loop, so every access goes
    through one lock.
    """

    def __init__(self, recipient_id: str | None) -> None:
        self.recipient_id = recipient_id
        self.confirmed: UnreadSnapshot | None = None
        self._optimistic: frozenset[str] = frozenset()
        self._lock = threading.Lock()

    @property
    def phase(self) -> str:
        return self.view()[0]

    @property
    def optimistic_ids(self) -> frozenset[str]:
        with self._lock:
            return self._optimistic

    @property
    def visible(self) -> tuple[NotificationRecord, ...]:
        return self.view()[1]

    @property
    def count(self) -> int:
        return len(self.visible)

    @property
    def has_unread(self) -> bool:
        # Hidden while loading rather than reported as "zero unread".
        return bool(self.visible)

    def view(self) -> tuple[str, tuple[NotificationRecord, ...]]:
        """Return the phase and the visible notifications as one consistent pair."""

        with self._lock:
            if self.confirmed is None:
                return PHASE_LOADING, ()
            hidden = self._optimistic
            visible = tuple(n for n in self.confirmed.notifications if n.id not in hidden)
            return (PHASE_OPTIMISTIC if hidden else PHASE_CONFIRMED), visible

    def mark_read(self, notification_ids: Iterable[str]) -> frozenset[str]:
        """Optimistically hide ``notification_ids`` and return the ids applied."""

        ids = frozenset(i for i in notification_ids if i)
        with self._lock:
            self._optimistic = self._optimistic | ids
        return ids

    def mark_all_read(self) -> frozenset[str]:
        """Optimistically hide every notification currently known as unread."""

        with self._lock:
            if self.confirmed is None:
                return frozenset()
            ids = self.confirmed.ids
            self._optimistic = self._optimistic | ids
        return ids

    def settle(self, notification_ids: Iterable[str]) -> None:
        """Drop optimistic entries once their write finished, successfully or not."""

        settled = frozenset(notification_ids)
        with self._lock:
            self._optimistic = self._optimistic - settled

    def apply_snapshot(self, snapshot: UnreadSnapshot) -> None:
        """Make ``snapshot`` authoritative and drop optimistic entries it confirms."""

        with self._lock:
            self.confirmed = snapshot
            self._optimistic = self._optimistic & snapshot.ids


__all__ = [
    "PHASE_CONFIRMED",
    "PHASE_LOADING",
    "PHASE_OPTIMISTIC",
    "UnreadIndicatorState",
]
