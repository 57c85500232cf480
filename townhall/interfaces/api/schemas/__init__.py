"""Schemas exposed by the HTTP API."""

from .notification import (
    NotificationContentRead,
    NotificationFanOutRequest,
    NotificationFanOutResult,
    NotificationMarkReadRequest,
    NotificationOperationResult,
    NotificationRead,
    NotificationStatusRead,
    UnreadCountRead,
)
from .preferences import NotificationPreferencesSchema

__all__ = [
    "NotificationContentRead",
    "NotificationFanOutRequest",
    "NotificationFanOutResult",
    "NotificationMarkReadRequest",
    "NotificationOperationResult",
    "NotificationPreferencesSchema",
    "NotificationRead",
    "NotificationStatusRead",
    "UnreadCountRead",
]
