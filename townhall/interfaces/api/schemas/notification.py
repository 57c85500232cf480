"""Pydantic models describing notification payloads.

Field aliases follow the stored document names (``userId``, ``status.read``).
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class NotificationContentRead(_CamelModel):
    title: str
    body: str
    source_id: str = Field(alias="sourceId")
    source_category_tag: str = Field(alias="sourceCategoryTag")


class NotificationStatusRead(_CamelModel):
    read: bool
    delivered: bool
    delivered_at: datetime | None = Field(default=None, alias="deliveredAt")


class NotificationRead(_CamelModel):
    """Representation of a notification delivered to the client."""

    id: str
    user_id: str = Field(alias="userId")
    community_id: str = Field(alias="communityId")
    post_id: str = Field(alias="postId")
    type: str
    priority: int
    content: NotificationContentRead
    created_at: datetime = Field(alias="createdAt")
    status: NotificationStatusRead


class NotificationFanOutRequest(_CamelModel):
    """Payload describing a post whose community members should be notified."""

    post_id: str = Field(alias="postId")
    title: str
    body: str
    category_tag: str = Field(alias="categoryTag")
    user_ids: list[str] | None = Field(
        default=None,
        alias="userIds",
        description="Recipients; the active community members when omitted",
    )


class NotificationFanOutResult(BaseModel):
    created: int


class NotificationMarkReadRequest(BaseModel):
    """Payload used to set the read flag of one or all notifications."""

    read: bool = True


class NotificationOperationResult(BaseModel):
    success: bool


class UnreadCountRead(_CamelModel):
    count: int
    has_unread: bool = Field(alias="hasUnread")


__all__ = [
    "NotificationContentRead",
    "NotificationFanOutRequest",
    "NotificationFanOutResult",
    "NotificationMarkReadRequest",
    "NotificationOperationResult",
    "NotificationRead",
    "NotificationStatusRead",
    "UnreadCountRead",
]
