# src/sheworks/schemas/notification.py
"""Notification schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from .common import CamelModel


class NotificationResponse(CamelModel):
    id: int
    kind: str
    text: str
    payload: dict[str, Any]
    read: bool
    created_at: datetime


class NotificationList(CamelModel):
    notifications: list[NotificationResponse]


class NotificationEnvelope(CamelModel):
    notification: NotificationResponse
