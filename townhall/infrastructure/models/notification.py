"""SQLAlchemy model for persisted notifications.

Column names mirror the document field names used by the clients
(``userId``, ``status.read`` ...) and must not be renamed.
"""

from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text

from townhall.infrastructure.database import Base


class NotificationModel(Base):
    """Database representation for user notifications."""

    __tablename__ = "notifications"

    id = Column(String(36), primary_key=True)
    user_id = Column("userId", String(128), key="user_id", nullable=False, index=True)
    community_id = Column("communityId", String(128), key="community_id", nullable=False)
    post_id = Column("postId", String(128), key="post_id", nullable=False)
    type = Column(String(50), nullable=False)
    priority = Column(Integer, nullable=False, default=1)
    title = Column("content.title", String(255), key="title", nullable=False)
    body = Column("content.body", Text, key="body", nullable=False)
    source_category_tag = Column(
        "content.sourceCategoryTag", String(64), key="source_category_tag", nullable=False
    )
    created_at = Column("createdAt", DateTime(), key="created_at", nullable=False)
    status_read = Column(
        "status.read", Boolean, key="status_read", nullable=False, default=False
    )
    status_delivered = Column(
        "status.delivered", Boolean, key="status_delivered", nullable=False, default=True
    )
    status_delivered_at = Column(
        "status.deliveredAt", DateTime(), key="status_delivered_at", nullable=True
    )


__all__ = ["NotificationModel"]
