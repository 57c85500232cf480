"""ORM models used by the application infrastructure."""

from .community_membership import CommunityMembershipModel
from .notification import NotificationModel

__all__ = [
    "CommunityMembershipModel",
    "NotificationModel",
]
