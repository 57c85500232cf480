"""Per-community notification preferences of a member."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Any, Mapping

from .notification import EMERGENCY_CATEGORY_TAG

# Category tags used on posts mapped to the preference flag that gates them.
CATEGORY_PREFERENCE_KEYS: dict[str, str] = {
    "generalDiscussion": "generalDiscussion",
    "safetyAndCrime": "safetyAndCrime",
    "governance": "governance",
    "disasterAndFire": "disasterAndFire",
    "businesses": "businesses",
    "resourcesAndRecovery": "resourcesAndRecovery",
    "communityEvents": "communityEvents",
    EMERGENCY_CATEGORY_TAG: "emergencyAlerts",
}
DEFAULT_PREFERENCE_KEY = "generalDiscussion"


@dataclass
class NotificationPreferences:
    """Flags controlling which post categories notify a member.

    Attribute names match the keys stored in the membership document.
    """

    emergencyAlerts: bool = True
    generalDiscussion: bool = True
    safetyAndCrime: bool = True
    governance: bool = True
    disasterAndFire: bool = True
    businesses: bool = True
    resourcesAndRecovery: bool = True
    communityEvents: bool = True
    pushNotifications: bool = True

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "NotificationPreferences":
        """Build preferences from stored data, defaulting missing flags to ``True``."""

        if not data:
            return cls()
        values = {}
        for item in fields(cls):
            value = data.get(item.name)
            if value is not None:
                values[item.name] = bool(value)
        return cls(**values)

    def to_mapping(self) -> dict[str, bool]:
        return asdict(self)

    def allows(self, category_tag: str) -> bool:
        """Return ``True`` when a post tagged ``category_tag`` should notify."""

        if category_tag == EMERGENCY_CATEGORY_TAG:
            return True
        key = preference_key_for_category(category_tag)
        return getattr(self, key) is True


def preference_key_for_category(category_tag: str) -> str:
    """Return the preference flag name for ``category_tag``."""

    return CATEGORY_PREFERENCE_KEYS.get(category_tag, DEFAULT_PREFERENCE_KEY)


__all__ = [
    "CATEGORY_PREFERENCE_KEYS",
    "DEFAULT_PREFERENCE_KEY",
    "NotificationPreferences",
    "preference_key_for_category",
]
