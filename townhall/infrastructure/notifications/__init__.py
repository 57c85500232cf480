"""Realtime notification helpers for the infrastructure layer."""

from .changes import ChangeListener, NotificationChangeFeed
from .manager import NotificationConnectionManager
from .publisher import (
    UNREAD_MESSAGE_TYPE,
    NotificationPublisher,
    build_unread_message,
    serialize_notification,
    serialize_unread_state,
)
from .realtime import LiveUnreadChannels

__all__ = [
    "ChangeListener",
    "LiveUnreadChannels",
    "NotificationChangeFeed",
    "NotificationConnectionManager",
    "NotificationPublisher",
    "UNREAD_MESSAGE_TYPE",
    "build_unread_message",
    "serialize_notification",
    "serialize_unread_state",
]
