"""Domain entity describing an event that fans out notifications."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class NotificationEvent:
    """A post created in a community, addressed to ``user_ids``.

    The post author is expected to be removed from ``user_ids`` by the caller.
    """

    community_id: str
    post_id: str
    title: str
    body: str
    category_tag: str
    user_ids: list[str] = field(default_factory=list)

    def unique_user_ids(self) -> list[str]:
        """Return the recipients without duplicates preserving order."""

        unique: list[str] = []
        seen: set[str] = set()
        for user_id in self.user_ids:
            if user_id in seen:
                continue
            seen.add(user_id)
            unique.append(user_id)
        return unique


__all__ = ["NotificationEvent"]
