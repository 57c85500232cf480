"""Pydantic models for member notification preferences."""

from __future__ import annotations

from pydantic import BaseModel


class NotificationPreferencesSchema(BaseModel):
    """Category flags controlling which posts notify the member."""

    emergencyAlerts: bool = True
    generalDiscussion: bool = True
    safetyAndCrime: bool = True
    governance: bool = True
    disasterAndFire: bool = True
    businesses: bool = True
    resourcesAndRecovery: bool = True
    communityEvents: bool = True
    pushNotifications: bool = True


__all__ = ["NotificationPreferencesSchema"]
