"""Domain entity representing a user notification."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

NOTIFICATION_TYPE_POST_CREATED = "post_created"
EMERGENCY_CATEGORY_TAG = "officialEmergencyAlerts"
EMERGENCY_PRIORITY = 3
DEFAULT_PRIORITY = 1


@dataclass
class NotificationContent:
    """Human readable description of the event that produced a notification."""

    title: str
    body: str
    source_id: str
    source_category_tag: str


@dataclass
class NotificationStatus:
    """Delivery and read state of a notification."""

    read: bool = False
    delivered: bool = True
    delivered_at: datetime | None = None


@dataclass
class NotificationRecord:
    """Notification addressed to exactly one recipient."""

    id: str | None
    user_id: str
    community_id: str
    post_id: str
    content: NotificationContent
    created_at: datetime | None = None
    type: str = NOTIFICATION_TYPE_POST_CREATED
    priority: int = DEFAULT_PRIORITY
    status: NotificationStatus = field(default_factory=NotificationStatus)


def priority_for_category(category_tag: str) -> int:
    """Return the priority assigned to notifications in ``category_tag``."""

    if category_tag == EMERGENCY_CATEGORY_TAG:
        return EMERGENCY_PRIORITY
    return DEFAULT_PRIORITY


__all__ = [
    "DEFAULT_PRIORITY",
    "EMERGENCY_CATEGORY_TAG",
    "EMERGENCY_PRIORITY",
    "NOTIFICATION_TYPE_POST_CREATED",
    "NotificationContent",
    "NotificationRecord",
    "NotificationStatus",
    "priority_for_category",
]
