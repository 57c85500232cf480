"""Aggregate application use cases."""

from .notifications import NotificationProducer, ReadStateReconciler, UnreadSubscriptionService

__all__ = [
    "NotificationProducer",
    "ReadStateReconciler",
    "UnreadSubscriptionService",
]
