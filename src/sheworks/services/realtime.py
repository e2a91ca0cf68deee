"""Realtime delivery over WebSocket connections.

This module provides:

- ConnectionManager: owns the live sockets, keyed by connection id
- RealtimeChannel: presence-aware emit to a participant
- RealtimeCoordinator: per-connection state machine handling the
  ``authenticate``, ``send_message`` and ``typing`` client events

The coordinator never lets an exception escape its handlers; failures are
reported to the originating connection as ``message_error`` events.
"""

from __future__ import annotations

import json
import logging
import uuid
from enum import Enum
from typing import Any

from fastapi import WebSocket
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from sheworks.core.security import InvalidTokenError, decode_access_token
from sheworks.schemas.realtime import (
    AuthenticatePayload,
    RealtimeEnvelope,
    SendMessagePayload,
    TypingPayload,
)
from sheworks.services.messaging import (
    InvalidRecipientError,
    MessagingService,
    RecipientNotFoundError,
    load_participant,
)
from sheworks.services.presence import PRESENCE_KINDS, PresenceRegistry

# Configure logger for this module
logger = logging.getLogger(__name__)

OPPOSITE_KIND = {"customer": "vendor", "vendor": "customer"}


class ConnectionState(str, Enum):
    """Lifecycle of a realtime connection."""

    CONNECTING = "connecting"
    ACTIVE = "active"
    TYPING = "typing"
    DISCONNECTED = "disconnected"


class ConnectionManager:
    """Registry of accepted WebSocket connections."""

    def __init__(self) -> None:
        self._connections: dict[str, WebSocket] = {}

    def __len__(self) -> int:
        return len(self._connections)

    async def connect(self, websocket: WebSocket) -> str:
        """Accept ``websocket`` and return the id assigned to it."""
        await websocket.accept()
        connection_id = uuid.uuid4().hex
        self._connections[connection_id] = websocket
        return connection_id

    def disconnect(self, connection_id: str) -> None:
        self._connections.pop(connection_id, None)

    async def send(self, connection_id: str, event: str, data: Any) -> bool:
        """Push ``{"event", "data"}`` to a connection.

        Returns:
            True when the frame was handed to the transport, False when the
            connection is unknown or the send failed.
        """
        websocket = self._connections.get(connection_id)
        if websocket is None:
            return False
        try:
            await websocket.send_json({"event": event, "data": data})
        except Exception as exc:  # transport closed underneath us
            logger.warning("Realtime send of %s to %s failed: %s", event, connection_id, exc)
            self._connections.pop(connection_id, None)
            return False
        return True


class RealtimeChannel:
    """Emit events to participants by looking up their live connection."""

    def __init__(self, presence: PresenceRegistry, connections: ConnectionManager) -> None:
        self.presence = presence
        self.connections = connections

    async def emit(self, participant_id: str, kind: str, event: str, data: Any) -> bool:
        """Send an event to a participant if they are connected.

        Returns:
            True if the event reached a live connection.
        """
        if kind not in PRESENCE_KINDS:
            return False
        connection_id = self.presence.lookup(participant_id, kind)
        if connection_id is None:
            return False
        return await self.connections.send(connection_id, event, data)


class RealtimeCoordinator:
    """Handles the client events of one WebSocket connection."""

    def __init__(self, connection_id: str, channel: RealtimeChannel, db: Session) -> None:
        self.connection_id = connection_id
        self.channel = channel
        self.db = db
        self.state = ConnectionState.CONNECTING
        self.participant_id: str | None = None
        self.participant_kind: str | None = None

    @property
    def authenticated(self) -> bool:
        return self.state in (ConnectionState.ACTIVE, ConnectionState.TYPING)

    async def _error(self, error: str, **extra: Any) -> None:
        await self.channel.connections.send(
            self.connection_id, "message_error", {"error": error, **extra}
        )

    async def handle_text(self, raw: str) -> None:
        """Decode one text frame and dispatch it."""
        try:
            decoded = json.loads(raw)
        except ValueError:
            await self._error("Malformed event")
            return
        await self.handle(decoded)

    async def handle(self, frame: Any) -> None:
        """Dispatch a decoded ``{"event", "data"}`` frame."""
        try:
            envelope = RealtimeEnvelope.model_validate(frame)
        except ValidationError:
            await self._error("Malformed event")
            return

        handlers = {
            "authenticate": self.on_authenticate,
            "send_message": self.on_send_message,
            "typing": self.on_typing,
        }
        handler = handlers.get(envelope.event)
        if handler is None:
            await self._error(f"Unknown event: {envelope.event}")
            return
        if envelope.event != "authenticate" and not self.authenticated:
            await self._error("Not authenticated")
            return

        try:
            await handler(envelope.data)
        except ValidationError as exc:
            details = exc.errors(include_url=False, include_context=False, include_input=False)
            await self._error("Invalid event payload", details=details)
        except Exception:
            logger.exception("Realtime handler %s failed on %s", envelope.event, self.connection_id)
            await self._error(f"Failed to handle {envelope.event}")

    async def on_authenticate(self, data: dict[str, Any]) -> None:
        payload = AuthenticatePayload.model_validate(data)
        try:
            claims = decode_access_token(payload.token)
        except InvalidTokenError:
            await self._error("Invalid token")
            return

        if claims.kind not in PRESENCE_KINDS:
            await self._error("Only customers and vendors can connect")
            return
        if (payload.user_id and payload.user_id != claims.subject) or (
            payload.user_type and payload.user_type != claims.kind
        ):
            await self._error("Identity does not match token")
            return
        if load_participant(self.db, claims.subject, claims.kind) is None:
            await self._error("Participant not found")
            return

        if self.participant_id is not None:
            self.channel.presence.unregister(self.connection_id)

        self.participant_id = claims.subject
        self.participant_kind = claims.kind
        self.channel.presence.register(claims.subject, claims.kind, self.connection_id)
        self.state = ConnectionState.ACTIVE
        logger.info("%s %s authenticated on %s", claims.kind, claims.subject, self.connection_id)
        await self.channel.connections.send(
            self.connection_id,
            "authenticated",
            {"userId": claims.subject, "userType": claims.kind},
        )

    async def on_send_message(self, data: dict[str, Any]) -> None:
        payload = SendMessagePayload.model_validate(data)
        if self.participant_id is None or self.participant_kind is None:
            await self._error("Not authenticated")
            return

        sender = load_participant(self.db, self.participant_id, self.participant_kind)
        if sender is None:
            await self._error("Sender not found")
            return

        service = MessagingService(self.db, self.channel)
        try:
            await service.send_message(
                sender,
                payload.recipient_id,
                payload.message,
                language=payload.language,
            )
        except RecipientNotFoundError:
            await self._error("Recipient not found")
        except InvalidRecipientError as exc:
            await self._error(str(exc))
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Persisting realtime message failed: %s", exc)
            await self._error("Failed to send message")

    async def on_typing(self, data: dict[str, Any]) -> None:
        payload = TypingPayload.model_validate(data)
        sender_kind = payload.sender_type or self.participant_kind
        recipient_kind = OPPOSITE_KIND.get(sender_kind or "")
        if recipient_kind is None:
            return

        self.state = ConnectionState.TYPING if payload.is_typing else ConnectionState.ACTIVE
        await self.channel.emit(
            payload.recipient_id,
            recipient_kind,
            "user_typing",
            {"userId": self.participant_id, "isTyping": payload.is_typing},
        )

    def disconnect(self) -> None:
        """Drop the connection and its presence entry."""
        self.channel.connections.disconnect(self.connection_id)
        if self.participant_id is not None:
            self.channel.presence.unregister(self.connection_id)
            logger.info(
                "%s %s disconnected from %s",
                self.participant_kind,
                self.participant_id,
                self.connection_id,
            )
        self.state = ConnectionState.DISCONNECTED
