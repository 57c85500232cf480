"""Domain entities exposed by the application."""

from .notification import (
    DEFAULT_PRIORITY,
    EMERGENCY_CATEGORY_TAG,
    EMERGENCY_PRIORITY,
    NOTIFICATION_TYPE_POST_CREATED,
    NotificationContent,
    NotificationRecord,
    NotificationStatus,
    priority_for_category,
)
from .notification_event import NotificationEvent
from .notification_preferences import (
    CATEGORY_PREFERENCE_KEYS,
    NotificationPreferences,
    preference_key_for_category,
)
from .unread_indicator import (
    PHASE_CONFIRMED,
    PHASE_LOADING,
    PHASE_OPTIMISTIC,
    UnreadIndicatorState,
)
from .unread_snapshot import UnreadSnapshot

__all__ = [
    "CATEGORY_PREFERENCE_KEYS",
    "DEFAULT_PRIORITY",
    "EMERGENCY_CATEGORY_TAG",
    "EMERGENCY_PRIORITY",
    "NOTIFICATION_TYPE_POST_CREATED",
    "PHASE_CONFIRMED",
    "PHASE_LOADING",
    "PHASE_OPTIMISTIC",
    "NotificationContent",
    "NotificationEvent",
    "NotificationPreferences",
    "NotificationRecord",
    "NotificationStatus",
    "UnreadIndicatorState",
    "UnreadSnapshot",
    "preference_key_for_category",
    "priority_for_category",
]
