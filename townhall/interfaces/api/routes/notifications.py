"""Endpoints and websocket handler for a user's notifications."""

from __future__ import annotations

import logging
from functools import partial
from typing import Callable, Iterable

from anyio import to_thread
from fastapi import (
    APIRouter,
    Depends,
    HTTPException,
    Query,
    Response,
    WebSocket,
    WebSocketDisconnect,
    status,
)
from sqlalchemy.orm import Session

from townhall.application.use_cases.notifications import (
    delete_all_notifications_for_user,
    delete_notification as delete_notification_uc,
    get_unread_notification_count,
    get_user_notification,
    list_user_notifications,
)
from townhall.config import get_settings
from townhall.domain.entities import NotificationRecord, UnreadIndicatorState
from townhall.infrastructure.notifications import serialize_notification
from townhall.interfaces.api.container import NotificationServices
from townhall.interfaces.api.dependencies import (
    get_current_user_id,
    get_db,
    get_notification_services,
    resolve_current_user_id,
)
from townhall.interfaces.api.schemas import (
    NotificationMarkReadRequest,
    NotificationOperationResult,
    NotificationRead,
    UnreadCountRead,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])
logger = logging.getLogger(__name__)


def _notification_to_schema(notification: NotificationRecord) -> NotificationRead:
    return NotificationRead.model_validate(serialize_notification(notification))


@router.get("/", response_model=list[NotificationRead])
def list_notifications(
    limit: int | None = Query(None, gt=0, le=500),
    db: Session = Depends(get_db),
    current_user_id: str = Depends(get_current_user_id),
) -> list[NotificationRead]:
    """Return the most recent notifications for the authenticated user."""

    notifications = list_user_notifications(
        db,
        user_id=current_user_id,
        limit=limit or get_settings().notification_list_limit,
    )
    return [_notification_to_schema(notification) for notification in notifications]


@router.get("/unread-count", response_model=UnreadCountRead)
def read_unread_count(
    db: Session = Depends(get_db),
    current_user_id: str = Depends(get_current_user_id),
) -> UnreadCountRead:
    count = get_unread_notification_count(db, user_id=current_user_id)
    return UnreadCountRead(count=count, has_unread=count > 0)


@router.post("/read-all", response_model=NotificationOperationResult)
def mark_all_notifications(
    payload: NotificationMarkReadRequest | None = None,
    services: NotificationServices = Depends(get_notification_services),
    current_user_id: str = Depends(get_current_user_id),
) -> NotificationOperationResult:
    """Set the read flag on every notification of the authenticated user."""

    read = payload.read if payload is not None else True
    success = services.reconciler.mark_all(current_user_id, read=read)
    return NotificationOperationResult(success=success)


@router.post("/{notification_id}/read", response_model=NotificationOperationResult)
def mark_notification(
    notification_id: str,
    payload: NotificationMarkReadRequest | None = None,
    db: Session = Depends(get_db),
    services: NotificationServices = Depends(get_notification_services),
    current_user_id: str = Depends(get_current_user_id),
) -> NotificationOperationResult:
    """Set the read flag on one notification of the authenticated user."""

    if get_user_notification(db, notification_id=notification_id, user_id=current_user_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found")
    read = payload.read if payload is not None else True
    success = services.reconciler.mark_one(notification_id, read=read)
    return NotificationOperationResult(success=success)


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_notification(
    notification_id: str,
    db: Session = Depends(get_db),
    services: NotificationServices = Depends(get_notification_services),
    current_user_id: str = Depends(get_current_user_id),
) -> Response:
    deleted = delete_notification_uc(
        db,
        notification_id=notification_id,
        user_id=current_user_id,
        change_feed=services.change_feed,
    )
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/", status_code=status.HTTP_204_NO_CONTENT)
def delete_all_notifications(
    db: Session = Depends(get_db),
    services: NotificationServices = Depends(get_notification_services),
    current_user_id: str = Depends(get_current_user_id),
) -> Response:
    delete_all_notifications_for_user(
        db, user_id=current_user_id, change_feed=services.change_feed
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


async def _reconcile(
    services: NotificationServices,
    state: UnreadIndicatorState,
    applied_ids: Iterable[str],
    write: Callable[[], bool],
) -> None:
    """Push the optimistic state, run ``write`` and let the live state settle."""

    user_id = state.recipient_id
    services.channels.push(user_id)
    success = await to_thread.run_sync(write)
    state.settle(applied_ids)
    if not success:
        logger.warning("Read state update failed for user %s; reverting indicator", user_id)
        services.channels.push(user_id)


@router.websocket("/ws")
async def notifications_websocket(websocket: WebSocket) -> None:
    """Websocket endpoint that streams the unread set of the authenticated user."""

    services: NotificationServices = websocket.app.state.notifications
    token = websocket.query_params.get("token")
    if not token:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return
    try:
        user_id = resolve_current_user_id(token)
    except HTTPException:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await services.connections.connect(user_id, websocket)
    state = services.channels.attach(user_id, websocket)
    try:
        while True:
            try:
                message = await websocket.receive_json()
            except (KeyError, ValueError):
                continue

            if not isinstance(message, dict):
                continue

            message_type = message.get("type")
            if message_type == "ping":
                await websocket.send_json({"type": "pong"})
                continue

            if message_type == "ack":
                ids = message.get("ids", [])
                if not isinstance(ids, list):
                    continue
                ids = [i for i in ids if isinstance(i, str) and i]
                if ids:
                    applied = state.mark_read(ids)
                    write = partial(services.reconciler.mark_many, ids, recipient_id=user_id)
                    await _reconcile(services, state, applied, write)
                continue

            if message_type == "ack-all":
                applied = state.mark_all_read()
                write = partial(services.reconciler.mark_all, user_id)
                await _reconcile(services, state, applied, write)
                continue
    except WebSocketDisconnect:
        logger.debug("Notification websocket closed for user %s", user_id)
    finally:
        services.connections.disconnect(user_id, websocket)
        if not services.connections.connection_count(user_id):
            services.channels.release(user_id)
