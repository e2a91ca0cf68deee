# tests/services/test_realtime_service.py
"""Tests for the realtime channel and the per-connection coordinator."""

import json

import pytest
from sqlalchemy import select

from sheworks.core.security import create_access_token
from sheworks.models import Message
from sheworks.services.presence import InMemoryPresenceRegistry
from sheworks.services.realtime import (
    ConnectionManager,
    ConnectionState,
    RealtimeChannel,
    RealtimeCoordinator,
)


class FakeWebSocket:
    """Records every JSON frame sent to it."""

    def __init__(self, broken: bool = False) -> None:
        self.accepted = False
        self.broken = broken
        self.sent: list[dict] = []

    async def accept(self) -> None:
        self.accepted = True

    async def send_json(self, data: dict) -> None:
        if self.broken:
            raise RuntimeError("socket closed")
        self.sent.append(data)

    def events(self, name: str) -> list[dict]:
        return [frame["data"] for frame in self.sent if frame["event"] == name]


@pytest.fixture
def channel() -> RealtimeChannel:
    return RealtimeChannel(InMemoryPresenceRegistry(), ConnectionManager())


async def _connect(channel, db_session, participant=None):
    websocket = FakeWebSocket()
    connection_id = await channel.connections.connect(websocket)
    coordinator = RealtimeCoordinator(connection_id, channel, db_session)
    if participant is not None:
        token = create_access_token(participant.id, participant.kind)
        await coordinator.handle({"event": "authenticate", "data": {"token": token}})
    return websocket, coordinator


@pytest.mark.asyncio
async def test_emit_to_offline_participant_returns_false(channel) -> None:
    assert await channel.emit("nobody", "customer", "new_message", {}) is False
    assert await channel.emit("nobody", "admin", "new_message", {}) is False


@pytest.mark.asyncio
async def test_failed_send_drops_connection(channel) -> None:
    websocket = FakeWebSocket(broken=True)
    connection_id = await channel.connections.connect(websocket)
    channel.presence.register("p1", "customer", connection_id)

    assert await channel.emit("p1", "customer", "ping", {}) is False
    assert len(channel.connections) == 0
    assert await channel.connections.send(connection_id, "ping", {}) is False


@pytest.mark.asyncio
async def test_authenticate_registers_presence(channel, db_session, customer) -> None:
    websocket, coordinator = await _connect(channel, db_session, customer)

    assert websocket.accepted
    assert coordinator.state is ConnectionState.ACTIVE
    assert channel.presence.lookup(customer.id, "customer") == coordinator.connection_id
    assert websocket.events("authenticated") == [
        {"userId": customer.id, "userType": "customer"}
    ]


@pytest.mark.asyncio
async def test_authenticate_rejects_bad_token(channel, db_session) -> None:
    websocket, coordinator = await _connect(channel, db_session)

    await coordinator.handle({"event": "authenticate", "data": {"token": "not-a-jwt"}})

    assert coordinator.state is ConnectionState.CONNECTING
    assert websocket.events("message_error") == [{"error": "Invalid token"}]


@pytest.mark.asyncio
async def test_authenticate_rejects_mismatched_identity(channel, db_session, customer) -> None:
    websocket, coordinator = await _connect(channel, db_session)
    token = create_access_token(customer.id, "customer")

    await coordinator.handle(
        {"event": "authenticate", "data": {"token": token, "userType": "vendor"}}
    )

    assert not coordinator.authenticated
    assert websocket.events("message_error") == [{"error": "Identity does not match token"}]


@pytest.mark.asyncio
async def test_admin_cannot_join_realtime(channel, db_session, admin) -> None:
    websocket, coordinator = await _connect(channel, db_session, admin)

    assert not coordinator.authenticated
    assert websocket.events("message_error")[0]["error"] == "Only customers and vendors can connect"


@pytest.mark.asyncio
async def test_events_before_authentication_are_refused(channel, db_session, vendor) -> None:
    websocket, coordinator = await _connect(channel, db_session)

    await coordinator.handle(
        {"event": "send_message", "data": {"recipientId": vendor.id, "message": "hi"}}
    )

    assert websocket.events("message_error") == [{"error": "Not authenticated"}]


@pytest.mark.asyncio
async def test_malformed_and_unknown_events(channel, db_session) -> None:
    websocket, coordinator = await _connect(channel, db_session)

    await coordinator.handle_text("{not json")
    await coordinator.handle({"data": {}})
    await coordinator.handle({"event": "dance", "data": {}})

    assert [e["error"] for e in websocket.events("message_error")] == [
        "Malformed event",
        "Malformed event",
        "Unknown event: dance",
    ]


@pytest.mark.asyncio
async def test_send_message_delivers_to_online_recipient(
    channel, db_session, customer, vendor
) -> None:
    customer_ws, customer_coord = await _connect(channel, db_session, customer)
    vendor_ws, _ = await _connect(channel, db_session, vendor)

    await customer_coord.handle_text(
        json.dumps(
            {
                "event": "send_message",
                "data": {"recipientId": vendor.id, "message": "Hello", "language": "en"},
            }
        )
    )

    received = vendor_ws.events("new_message")
    assert len(received) == 1
    assert received[0]["text"] == "Hello"
    assert received[0]["sender"]["participantId"] == customer.id

    confirmed = customer_ws.events("message_sent")
    assert len(confirmed) == 1
    assert confirmed[0]["status"] == "delivered"

    stored = db_session.scalars(select(Message)).one()
    assert stored.status == "delivered"


@pytest.mark.asyncio
async def test_send_message_to_offline_recipient_stays_sent(
    channel, db_session, customer, vendor
) -> None:
    customer_ws, customer_coord = await _connect(channel, db_session, customer)

    await customer_coord.handle(
        {"event": "send_message", "data": {"recipientId": vendor.id, "message": "Anyone?"}}
    )

    assert customer_ws.events("message_sent")[0]["status"] == "sent"
    assert db_session.scalars(select(Message)).one().status == "sent"


@pytest.mark.asyncio
async def test_send_message_unknown_recipient(channel, db_session, customer) -> None:
    websocket, coordinator = await _connect(channel, db_session, customer)

    await coordinator.handle(
        {"event": "send_message", "data": {"recipientId": "missing", "message": "hi"}}
    )

    assert websocket.events("message_error") == [{"error": "Recipient not found"}]


@pytest.mark.asyncio
async def test_send_message_invalid_payload(channel, db_session, customer, vendor) -> None:
    websocket, coordinator = await _connect(channel, db_session, customer)

    await coordinator.handle(
        {"event": "send_message", "data": {"recipientId": vendor.id, "message": "x" * 2001}}
    )

    error = websocket.events("message_error")[0]
    assert error["error"] == "Invalid event payload"
    assert error["details"]


@pytest.mark.asyncio
async def test_typing_is_relayed_to_opposite_kind(channel, db_session, customer, vendor) -> None:
    _, customer_coord = await _connect(channel, db_session, customer)
    vendor_ws, _ = await _connect(channel, db_session, vendor)

    await customer_coord.handle(
        {"event": "typing", "data": {"recipientId": vendor.id, "isTyping": True}}
    )
    assert customer_coord.state is ConnectionState.TYPING

    await customer_coord.handle(
        {"event": "typing", "data": {"recipientId": vendor.id, "isTyping": False}}
    )
    assert customer_coord.state is ConnectionState.ACTIVE

    assert vendor_ws.events("user_typing") == [
        {"userId": customer.id, "isTyping": True},
        {"userId": customer.id, "isTyping": False},
    ]


@pytest.mark.asyncio
async def test_disconnect_clears_presence(channel, db_session, vendor) -> None:
    _, coordinator = await _connect(channel, db_session, vendor)

    coordinator.disconnect()

    assert coordinator.state is ConnectionState.DISCONNECTED
    assert channel.presence.lookup(vendor.id, "vendor") is None
    assert len(channel.connections) == 0


@pytest.mark.asyncio
async def test_send_handler_refuses_unauthenticated_connection(
    channel, db_session, vendor
) -> None:
    websocket, coordinator = await _connect(channel, db_session)

    await coordinator.on_send_message({"recipientId": vendor.id, "message": "hi"})

    assert websocket.events("message_error") == [{"error": "Not authenticated"}]
    assert websocket.events("message_sent") == []
