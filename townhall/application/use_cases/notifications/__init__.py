"""Public helpers for the notification flow."""

from .inbox import (
    delete_all_notifications_for_user,
    delete_notification,
    get_unread_notification_count,
    get_user_notification,
    list_community_recipients,
    list_user_notifications,
)
from .preferences import (
    get_notification_preferences,
    initialize_notification_preferences,
    update_notification_preferences,
)
from .producer import NotificationProducer, build_records
from .read_state import ReadStateReconciler
from .subscriptions import Subscription, UnreadObserver, UnreadSubscriptionService
from .validators import ensure_valid_event

__all__ = [
    "NotificationProducer",
    "ReadStateReconciler",
    "Subscription",
    "UnreadObserver",
    "UnreadSubscriptionService",
    "build_records",
    "delete_all_notifications_for_user",
    "delete_notification",
    "ensure_valid_event",
    "get_notification_preferences",
    "get_unread_notification_count",
    "get_user_notification",
    "initialize_notification_preferences",
    "list_community_recipients",
    "list_user_notifications",
    "update_notification_preferences",
]
