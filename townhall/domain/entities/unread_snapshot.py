"""Snapshot of a recipient's unread notifications."""

from __future__ import annotations

from dataclasses import dataclass, field

from .notification import NotificationRecord


@dataclass(frozen=True)
class UnreadSnapshot:
    """Full unread set delivered by a live subscription."""

    recipient_id: str | None
    notifications: tuple[NotificationRecord, ...] = field(default_factory=tuple)

    @property
    def count(self) -> int:
        return len(self.notifications)

    @property
    def has_unread(self) -> bool:
        return bool(self.notifications)

    @property
    def ids(self) -> frozenset[str]:
        return frozenset(n.id for n in self.notifications if n.id is not None)

    @classmethod
    def empty(cls, recipient_id: str | None = None) -> "UnreadSnapshot":
        return cls(recipient_id=recipient_id)


__all__ = ["UnreadSnapshot"]
