"""Persistence helpers for community memberships and their preferences."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from townhall.domain.entities import NotificationPreferences
from townhall.infrastructure.models import CommunityMembershipModel
from townhall.utils import now_in_app_timezone, to_storage

MEMBERSHIP_STATUS_ACTIVE = "active"


class MembershipRepository:
    """Read and update the notification preferences stored on memberships."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def _get_model(self, user_id: str, community_id: str) -> CommunityMembershipModel | None:
        return (
            self.session.query(CommunityMembershipModel)
            .filter(CommunityMembershipModel.user_id == user_id)
            .filter(CommunityMembershipModel.community_id == community_id)
            .first()
        )

    def exists(self, user_id: str, community_id: str) -> bool:
        return self._get_model(user_id, community_id) is not None

    def add(
        self,
        user_id: str,
        community_id: str,
        *,
        status: str = MEMBERSHIP_STATUS_ACTIVE,
        preferences: NotificationPreferences | None = None,
    ) -> None:
        model = CommunityMembershipModel(
            user_id=user_id,
            community_id=community_id,
            status=status,
            notification_preferences=preferences.to_mapping() if preferences else None,
            join_date=to_storage(now_in_app_timezone()),
        )
        try:
            self.session.add(model)
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise

    def list_active_member_ids(self, community_id: str) -> list[str]:
        rows = (
            self.session.query(CommunityMembershipModel.user_id)
            .filter(CommunityMembershipModel.community_id == community_id)
            .filter(CommunityMembershipModel.status == MEMBERSHIP_STATUS_ACTIVE)
            .order_by(CommunityMembershipModel.id)
            .all()
        )
        return [row[0] for row in rows]

    def get_preferences(
        self, user_id: str, community_id: str
    ) -> NotificationPreferences | None:
        """Return stored preferences, or ``None`` when nothing is stored."""

        model = self._get_model(user_id, community_id)
        if model is None or model.notification_preferences is None:
            return None
        return NotificationPreferences.from_mapping(model.notification_preferences)

    def get_preferences_for_users(
        self, community_id: str, user_ids: Sequence[str]
    ) -> dict[str, NotificationPreferences]:
        """Return preferences keyed by user for every member of ``community_id``.

        Users without a membership row are absent from the result; members
        without stored preferences get the defaults.
        """

        if not user_ids:
            return {}
        models = (
            self.session.query(CommunityMembershipModel)
            .filter(CommunityMembershipModel.community_id == community_id)
            .filter(CommunityMembershipModel.user_id.in_(list(user_ids)))
            .all()
        )
        return {
            model.user_id: NotificationPreferences.from_mapping(model.notification_preferences)
            for model in models
        }

    def set_preferences(
        self,
        user_id: str,
        community_id: str,
        preferences: NotificationPreferences,
        *,
        only_if_missing: bool = False,
    ) -> bool:
        """Store ``preferences`` on the membership.

        Returns ``False`` when the user is not a member of the community.
        """

        model = self._get_model(user_id, community_id)
        if model is None:
            return False
        if only_if_missing and model.notification_preferences is not None:
            return True
        model.notification_preferences = preferences.to_mapping()
        try:
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise
        return True


__all__ = ["MEMBERSHIP_STATUS_ACTIVE", "MembershipRepository"]
