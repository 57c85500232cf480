"""Persistence helpers for notification entities."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Iterable
from uuid import uuid4

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from townhall.domain.entities import (
    NotificationContent,
    NotificationRecord,
    NotificationStatus,
)
from townhall.infrastructure.models import NotificationModel
from townhall.infrastructure.notifications.changes import NotificationChangeFeed
from townhall.utils import from_storage, now_in_app_timezone, to_storage

# Upper bound of identifiers bound into a single ``IN`` clause.
ID_CHUNK_SIZE = 450


class NotificationRepository:
    """Provide CRUD operations for :class:`NotificationRecord` objects.

    Every committed write is announced on ``change_feed`` for the affected
    recipients.
    """

    def __init__(
        self, session: Session, change_feed: NotificationChangeFeed | None = None
    ) -> None:
        self.session = session
        self.change_feed = change_feed

    def get(self, notification_id: str) -> NotificationRecord | None:
        model = self.session.get(NotificationModel, notification_id)
        return self._to_entity(model) if model is not None else None

    def list_for_user(
        self,
        user_id: str,
        *,
        limit: int | None = 50,
    ) -> Sequence[NotificationRecord]:
        query = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.user_id == user_id)
            .order_by(NotificationModel.created_at.desc(), NotificationModel.id.desc())
        )
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()]

    def list_unread_for_user(
        self, user_id: str, *, limit: int | None = None
    ) -> Sequence[NotificationRecord]:
        query = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.user_id == user_id)
            .filter(NotificationModel.status_read.is_(False))
            .order_by(NotificationModel.created_at.desc(), NotificationModel.id.desc())
        )
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()]

    def list_ids_with_read_state(self, user_id: str, *, read: bool) -> list[str]:
        rows = (
            self.session.query(NotificationModel.id)
            .filter(NotificationModel.user_id == user_id)
            .filter(NotificationModel.status_read.is_(read))
            .all()
        )
        return [row[0] for row in rows]

    def count_unread(self, user_id: str) -> int:
        return (
            self.session.query(NotificationModel)
            .filter(NotificationModel.user_id == user_id)
            .filter(NotificationModel.status_read.is_(False))
            .count()
        )

    def create_many(
        self, notifications: Sequence[NotificationRecord]
    ) -> list[NotificationRecord]:
        """Persist ``notifications`` in a single transaction.

        Either every record is stored or, on failure, none is and the error
        propagates to the caller.
        """

        models = []
        for notification in notifications:
            model = NotificationModel()
            self._apply_entity_to_model(model, notification)
            models.append(model)
        try:
            self.session.add_all(models)
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise
        saved = [self._to_entity(model) for model in models]
        self._publish(record.user_id for record in saved)
        return saved

    def set_read(self, notification_id: str, *, read: bool) -> NotificationRecord | None:
        """Set ``status.read`` on one record.

        Returns ``None`` when the record does not exist. No write is issued when
        the record is already in the requested state.
        """

        model = self.session.get(NotificationModel, notification_id)
        if model is None:
            return None
        if bool(model.status_read) is read:
            return self._to_entity(model)
        model.status_read = read
        try:
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise
        self._publish([model.user_id])
        return self._to_entity(model)

    def set_read_many(
        self, notification_ids: Iterable[str], *, user_id: str, read: bool
    ) -> int:
        """Set ``status.read`` on the given records of ``user_id`` in one commit."""

        ids = [notification_id for notification_id in notification_ids if notification_id]
        if not ids:
            return 0
        updated = 0
        try:
            for start in range(0, len(ids), ID_CHUNK_SIZE):
                chunk = ids[start : start + ID_CHUNK_SIZE]
                updated += (
                    self.session.query(NotificationModel)
                    .filter(
                        NotificationModel.id.in_(chunk),
                        NotificationModel.user_id == user_id,
                    )
                    .update({NotificationModel.status_read: read}, synchronize_session=False)
                )
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise
        self._publish([user_id])
        return updated

    def delete(self, notification_id: str, *, user_id: str | None = None) -> bool:
        model = self.session.get(NotificationModel, notification_id)
        if model is None or (user_id is not None and model.user_id != user_id):
            return False
        owner = model.user_id
        try:
            self.session.delete(model)
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise
        self._publish([owner])
        return True

    def delete_all_for_user(self, user_id: str) -> int:
        try:
            deleted = (
                self.session.query(NotificationModel)
                .filter(NotificationModel.user_id == user_id)
                .delete(synchronize_session=False)
            )
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise
        self._publish([user_id])
        return deleted

    def _publish(self, user_ids: Iterable[str]) -> None:
        if self.change_feed is not None:
            self.change_feed.publish(user_ids)

    @staticmethod
    def _apply_entity_to_model(
        model: NotificationModel, notification: NotificationRecord
    ) -> None:
        created_at = notification.created_at or now_in_app_timezone()
        model.id = notification.id or uuid4().hex
        model.user_id = notification.user_id
        model.community_id = notification.community_id
        model.post_id = notification.post_id
        model.type = notification.type
        model.priority = notification.priority
        model.title = notification.content.title
        model.body = notification.content.body
        model.source_category_tag = notification.content.source_category_tag
        model.created_at = to_storage(created_at)
        model.status_read = notification.status.read
        model.status_delivered = notification.status.delivered
        model.status_delivered_at = to_storage(
            notification.status.delivered_at or created_at
        )

    @staticmethod
    def _to_entity(model: NotificationModel) -> NotificationRecord:
        return NotificationRecord(
            id=model.id,
            user_id=model.user_id,
            community_id=model.community_id,
            post_id=model.post_id,
            type=model.type,
            priority=model.priority,
            content=NotificationContent(
                title=model.title,
                body=model.body,
                source_id=model.post_id,
                source_category_tag=model.source_category_tag,
            ),
            created_at=from_storage(model.created_at),
            status=NotificationStatus(
                read=bool(model.status_read),
                delivered=bool(model.status_delivered),
                delivered_at=from_storage(model.status_delivered_at),
            ),
        )


__all__ = ["ID_CHUNK_SIZE", "NotificationRepository"]
