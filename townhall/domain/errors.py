"""Exceptions raised by the notification use cases."""


class NotificationError(Exception):
    """Base class for notification flow failures."""


class NotificationValidationError(NotificationError, ValueError):
    """Raised when a fan-out request is missing required fields."""


class NotificationDeliveryError(NotificationError):
    """Raised when the fan-out batch could not be persisted."""


class MembershipNotFoundError(NotificationError, LookupError):
    """Raised when a user has no membership in the requested community."""


__all__ = [
    "MembershipNotFoundError",
    "NotificationDeliveryError",
    "NotificationError",
    "NotificationValidationError",
]
