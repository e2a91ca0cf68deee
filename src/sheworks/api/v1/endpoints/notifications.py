# src/sheworks/api/v1/endpoints/notifications.py
"""Notification endpoints for the SheWorks API."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status
from sqlalchemy import func, select

from sheworks.models import Notification
from sheworks.schemas.message import UnreadCount
from sheworks.schemas.notification import (
    NotificationEnvelope,
    NotificationList,
    NotificationResponse,
)

from ..dependencies import CurrentParticipantDep, SessionDep

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("/", response_model=NotificationList)
async def list_notifications(current: CurrentParticipantDep, db: SessionDep) -> NotificationList:
    """Return the caller's notifications, newest first."""
    notifications = db.scalars(
        select(Notification)
        .where(Notification.owner_id == current.id, Notification.owner_kind == current.kind)
        .order_by(Notification.created_at.desc(), Notification.id.desc())
    )
    return NotificationList(
        notifications=[NotificationResponse.model_validate(item) for item in notifications]
    )


@router.get("/unread-count", response_model=UnreadCount)
async def notification_unread_count(current: CurrentParticipantDep, db: SessionDep) -> UnreadCount:
    count = db.scalar(
        select(func.count())
        .select_from(Notification)
        .where(
            Notification.owner_id == current.id,
            Notification.owner_kind == current.kind,
            Notification.read.is_(False),
        )
    )
    return UnreadCount(unread_count=int(count or 0))


@router.put("/{notification_id}/read", response_model=NotificationEnvelope)
async def mark_notification_read(
    notification_id: int,
    current: CurrentParticipantDep,
    db: SessionDep,
) -> NotificationEnvelope:
    """Mark one of the caller's notifications as read."""
    notification = db.get(Notification, notification_id)
    if (
        notification is None
        or notification.owner_id != current.id
        or notification.owner_kind != current.kind
    ):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found")
    notification.read = True
    db.commit()
    db.refresh(notification)
    return NotificationEnvelope(notification=NotificationResponse.model_validate(notification))
