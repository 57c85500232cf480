"""Wiring of the notification components for one application instance."""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.orm import Session, sessionmaker

from townhall.application.use_cases.notifications import (
    NotificationProducer,
    ReadStateReconciler,
    UnreadSubscriptionService,
)
from townhall.infrastructure.notifications import (
    LiveUnreadChannels,
    NotificationChangeFeed,
    NotificationConnectionManager,
    NotificationPublisher,
)


@dataclass
class NotificationServices:
    """Notification components sharing one store handle and change feed."""

    session_factory: sessionmaker[Session]
    change_feed: NotificationChangeFeed
    producer: NotificationProducer
    subscriptions: UnreadSubscriptionService
    reconciler: ReadStateReconciler
    connections: NotificationConnectionManager
    publisher: NotificationPublisher
    channels: LiveUnreadChannels

    @classmethod
    def build(cls, session_factory: sessionmaker[Session]) -> "NotificationServices":
        change_feed = NotificationChangeFeed()
        subscriptions = UnreadSubscriptionService(session_factory, change_feed)
        connections = NotificationConnectionManager()
        publisher = NotificationPublisher(connections)
        return cls(
            session_factory=session_factory,
            change_feed=change_feed,
            producer=NotificationProducer(session_factory, change_feed),
            subscriptions=subscriptions,
            reconciler=ReadStateReconciler(session_factory, change_feed),
            connections=connections,
            publisher=publisher,
            channels=LiveUnreadChannels(publisher, subscriptions.subscribe),
        )


__all__ = ["NotificationServices"]
