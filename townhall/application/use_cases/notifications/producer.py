"""Fan out one notification per recipient when a post is created."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from townhall.domain.entities import (
    NotificationContent,
    NotificationEvent,
    NotificationRecord,
    NotificationStatus,
    NOTIFICATION_TYPE_POST_CREATED,
    priority_for_category,
)
from townhall.domain.errors import NotificationDeliveryError
from townhall.infrastructure.notifications import NotificationChangeFeed
from townhall.infrastructure.repositories import MembershipRepository, NotificationRepository
from townhall.utils import now_in_app_timezone

from .validators import ensure_valid_event

logger = logging.getLogger(__name__)


class NotificationProducer:
    """Create the notification records of a post event in one transaction."""

    def __init__(
        self, session_factory: sessionmaker[Session], change_feed: NotificationChangeFeed
    ) -> None:
        self._session_factory = session_factory
        self._change_feed = change_feed

    def create_for_community(self, event: NotificationEvent) -> list[NotificationRecord]:
        """Persist one unread notification per recipient of ``event``.

        Recipients that are not members of the community, or that opted out of
        the event's category, are skipped. All records share a single
        ``createdAt`` and are committed atomically; on failure nothing is stored
        and :class:`NotificationDeliveryError` is raised without retrying.
        """

        recipients = ensure_valid_event(event)

        with self._session_factory() as session:
            try:
                recipients = self._filter_by_preferences(session, event, recipients)
                if not recipients:
                    logger.info(
                        "No recipients accept %s notifications for post %s",
                        event.category_tag,
                        event.post_id,
                    )
                    return []
                records = build_records(event, recipients)
                saved = NotificationRepository(session, self._change_feed).create_many(records)
            except SQLAlchemyError as exc:
                logger.exception(
                    "Failed to create notifications for post %s in community %s",
                    event.post_id,
                    event.community_id,
                )
                raise NotificationDeliveryError(
                    "Notifications could not be stored"
                ) from exc

        logger.info(
            "Created %d notifications for post %s in community %s",
            len(saved),
            event.post_id,
            event.community_id,
        )
        return saved

    @staticmethod
    def _filter_by_preferences(
        session: Session, event: NotificationEvent, recipients: Sequence[str]
    ) -> list[str]:
        by_member = MembershipRepository(session).get_preferences_for_users(
            event.community_id, recipients
        )
        accepted = []
        for user_id in recipients:
            preferences = by_member.get(user_id)
            if preferences is None:
                logger.warning(
                    "Skipping user %s: no membership in community %s",
                    user_id,
                    event.community_id,
                )
                continue
            if preferences.allows(event.category_tag):
                accepted.append(user_id)
        return accepted


def build_records(
    event: NotificationEvent, recipients: Sequence[str]
) -> list[NotificationRecord]:
    """Return unsaved records for ``recipients`` sharing one creation timestamp."""

    created_at = now_in_app_timezone()
    priority = priority_for_category(event.category_tag)
    return [
        NotificationRecord(
            id=None,
            user_id=user_id,
            community_id=event.community_id,
            post_id=event.post_id,
            type=NOTIFICATION_TYPE_POST_CREATED,
            priority=priority,
            content=NotificationContent(
                title=event.title,
                body=event.body,
                source_id=event.post_id,
                source_category_tag=event.category_tag,
            ),
            created_at=created_at,
            status=NotificationStatus(read=False, delivered=True, delivered_at=created_at),
        )
        for user_id in recipients
    ]


__all__ = ["NotificationProducer", "build_records"]
