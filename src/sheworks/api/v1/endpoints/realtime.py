# src/sheworks/api/v1/endpoints/realtime.py
"""Realtime WebSocket channel for chat, typing indicators and order alerts."""

from __future__ import annotations

import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect, status

from sheworks.core.settings import settings
from sheworks.services.realtime import RealtimeChannel, RealtimeCoordinator

from ..dependencies import SessionDep

# Configure logger for this module
logger = logging.getLogger(__name__)

router = APIRouter(tags=["realtime"])


@router.websocket("/realtime")
async def realtime(websocket: WebSocket, db: SessionDep) -> None:
    """Serve one client connection.

    Frames are JSON ``{"event": ..., "data": {...}}`` objects in both
    directions. The client must send ``authenticate`` before anything else.
    """
    origin = websocket.headers.get("origin")
    if origin and origin not in settings.allowed_origins:
        logger.warning("Rejected realtime connection from origin %s", origin)
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    channel: RealtimeChannel = websocket.app.state.realtime_channel
    connection_id = await channel.connections.connect(websocket)
    coordinator = RealtimeCoordinator(connection_id, channel, db)
    logger.info("Realtime connection %s opened", connection_id)
    try:
        while True:
            raw = await websocket.receive_text()
            await coordinator.handle_text(raw)
    except WebSocketDisconnect:
        pass
    finally:
        coordinator.disconnect()
        logger.info("Realtime connection %s closed", connection_id)
