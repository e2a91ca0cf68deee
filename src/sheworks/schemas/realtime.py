# src/sheworks/schemas/realtime.py
"""Frames exchanged over the realtime WebSocket."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import Field

from sheworks.models.message import MESSAGE_MAX_LENGTH

from .common import CamelModel
from .message import LanguageCode


class RealtimeEnvelope(CamelModel):
    """Outer ``{"event", "data"}`` frame."""

    event: str = Field(..., min_length=1)
    data: dict[str, Any] = Field(default_factory=dict)


class AuthenticatePayload(CamelModel):
    """Data of the ``authenticate`` client event."""

    token: str = Field(..., min_length=1)
    user_id: str | None = None
    user_type: Literal["customer", "vendor"] | None = None


class SendMessagePayload(CamelModel):
    """Data of the ``send_message`` client event."""

    recipient_id: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1, max_length=MESSAGE_MAX_LENGTH)
    language: LanguageCode = "en"
    sender_type: Literal["customer", "vendor"] | None = None


class TypingPayload(CamelModel):
    """Data of the ``typing`` client event."""

    recipient_id: str = Field(..., min_length=1)
    is_typing: bool = False
    sender_type: Literal["customer", "vendor"] | None = None
