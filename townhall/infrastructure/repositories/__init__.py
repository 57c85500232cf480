"""Repository implementations for infrastructure layer."""

from .membership_repository import MembershipRepository
from .notification_repository import NotificationRepository

__all__ = [
    "MembershipRepository",
    "NotificationRepository",
]
