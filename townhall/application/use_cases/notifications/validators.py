"""Validation helpers for notification fan-out requests."""

from townhall.domain.entities import NotificationEvent
from townhall.domain.errors import NotificationValidationError


def _require_text(value: str | None, field_name: str) -> str:
    if value is None or not str(value).strip():
        raise NotificationValidationError(f"{field_name} is required")
    return str(value).strip()


def ensure_valid_event(event: NotificationEvent) -> list[str]:
    """Validate ``event`` and return its distinct recipient ids.

    Raises :class:`NotificationValidationError` before anything is written.
    """

    _require_text(event.community_id, "communityId")
    _require_text(event.post_id, "postId")
    _require_text(event.title, "title")
    _require_text(event.category_tag, "categoryTag")
    if event.body is None:
        raise NotificationValidationError("body is required")

    if not event.user_ids:
        raise NotificationValidationError("userIds must contain at least one recipient")
    for user_id in event.user_ids:
        if not isinstance(user_id, str) or not user_id.strip():
            raise NotificationValidationError("userIds must not contain blank identifiers")
    return event.unique_user_ids()


__all__ = ["ensure_valid_event"]
