"""Community-scoped notification endpoints: post fan-out and member preferences."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from townhall.application.use_cases.notifications import (
    get_notification_preferences,
    list_community_recipients,
    update_notification_preferences,
)
from townhall.domain.entities import NotificationEvent, NotificationPreferences
from townhall.domain.errors import (
    MembershipNotFoundError,
    NotificationDeliveryError,
    NotificationValidationError,
)
from townhall.interfaces.api.container import NotificationServices
from townhall.interfaces.api.dependencies import (
    get_current_user_id,
    get_db,
    get_notification_services,
)
from townhall.interfaces.api.schemas import (
    NotificationFanOutRequest,
    NotificationFanOutResult,
    NotificationPreferencesSchema,
)

router = APIRouter(prefix="/communities", tags=["communities"])
logger = logging.getLogger(__name__)


@router.post(
    "/{community_id}/notifications",
    response_model=NotificationFanOutResult,
    status_code=status.HTTP_201_CREATED,
)
def fan_out_post_notifications(
    community_id: str,
    payload: NotificationFanOutRequest,
    db: Session = Depends(get_db),
    services: NotificationServices = Depends(get_notification_services),
    current_user_id: str = Depends(get_current_user_id),
) -> NotificationFanOutResult:
    """Notify the community about a post written by the authenticated user."""

    if payload.user_ids is None:
        recipients = list_community_recipients(
            db, community_id=community_id, exclude_user_id=current_user_id
        )
    else:
        recipients = [user_id for user_id in payload.user_ids if user_id != current_user_id]

    if not recipients:
        logger.info("Post %s in community %s has no one to notify", payload.post_id, community_id)
        return NotificationFanOutResult(created=0)

    event = NotificationEvent(
        community_id=community_id,
        post_id=payload.post_id,
        title=payload.title,
        body=payload.body,
        category_tag=payload.category_tag,
        user_ids=recipients,
    )
    try:
        created = services.producer.create_for_community(event)
    except NotificationValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except NotificationDeliveryError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
        ) from exc
    return NotificationFanOutResult(created=len(created))


@router.get(
    "/{community_id}/notification-preferences",
    response_model=NotificationPreferencesSchema,
)
def read_notification_preferences(
    community_id: str,
    db: Session = Depends(get_db),
    current_user_id: str = Depends(get_current_user_id),
) -> NotificationPreferencesSchema:
    try:
        preferences = get_notification_preferences(
            db, user_id=current_user_id, community_id=community_id
        )
    except MembershipNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return NotificationPreferencesSchema(**preferences.to_mapping())


@router.put(
    "/{community_id}/notification-preferences",
    response_model=NotificationPreferencesSchema,
)
def replace_notification_preferences(
    community_id: str,
    payload: NotificationPreferencesSchema,
    db: Session = Depends(get_db),
    current_user_id: str = Depends(get_current_user_id),
) -> NotificationPreferencesSchema:
    try:
        preferences = update_notification_preferences(
            db,
            user_id=current_user_id,
            community_id=community_id,
            preferences=NotificationPreferences(**payload.model_dump()),
        )
    except MembershipNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return NotificationPreferencesSchema(**preferences.to_mapping())
