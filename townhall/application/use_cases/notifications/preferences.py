"""Use cases for the per-community notification preferences of a member."""

from __future__ import annotations

from sqlalchemy.orm import Session

from townhall.domain.entities import NotificationPreferences
from townhall.domain.errors import MembershipNotFoundError, NotificationValidationError
from townhall.infrastructure.repositories import MembershipRepository


def _ensure_identifiers(user_id: str, community_id: str) -> None:
    if not user_id or not community_id:
        raise NotificationValidationError("userId and communityId are required")


def initialize_notification_preferences(
    session: Session, *, user_id: str, community_id: str
) -> NotificationPreferences:
    """Store the default preferences unless the member already has some."""

    _ensure_identifiers(user_id, community_id)
    defaults = NotificationPreferences()
    stored = MembershipRepository(session).set_preferences(
        user_id, community_id, defaults, only_if_missing=True
    )
    if not stored:
        raise MembershipNotFoundError("Membership not found for this user and community")
    return get_notification_preferences(session, user_id=user_id, community_id=community_id)


def get_notification_preferences(
    session: Session, *, user_id: str, community_id: str
) -> NotificationPreferences:
    """Return the member's preferences, initializing the defaults on first access."""

    _ensure_identifiers(user_id, community_id)
    repository = MembershipRepository(session)
    preferences = repository.get_preferences(user_id, community_id)
    if preferences is not None:
        return preferences
    if not repository.exists(user_id, community_id):
        raise MembershipNotFoundError("Membership not found for this user and community")
    return initialize_notification_preferences(
        session, user_id=user_id, community_id=community_id
    )


def update_notification_preferences(
    session: Session,
    *,
    user_id: str,
    community_id: str,
    preferences: NotificationPreferences,
) -> NotificationPreferences:
    """Replace the member's preferences with ``preferences``."""

    _ensure_identifiers(user_id, community_id)
    if not MembershipRepository(session).set_preferences(user_id, community_id, preferences):
        raise MembershipNotFoundError("Membership not found for this user and community")
    return preferences


__all__ = [
    "get_notification_preferences",
    "initialize_notification_preferences",
    "update_notification_preferences",
]
