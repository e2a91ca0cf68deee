# tests/services/test_messaging.py
import pytest

from sheworks.services.messaging import (
    InvalidRecipientError,
    MessagingService,
    RecipientNotFoundError,
    find_by_email,
    resolve_participant,
)


@pytest.fixture
def channel(mocker):
    channel = mocker.MagicMock()
    channel.emit = mocker.AsyncMock(return_value=False)
    return channel


def test_resolve_participant_checks_customers_then_vendors(db_session, customer, vendor) -> None:
    assert resolve_participant(db_session, customer.id) is customer
    assert resolve_participant(db_session, vendor.id) is vendor
    assert resolve_participant(db_session, "missing") is None


def test_find_by_email_is_case_insensitive(db_session, customer, vendor) -> None:
    assert find_by_email(db_session, "  AMARA@example.com ") is customer
    assert find_by_email(db_session, "Atelier@Example.com") is vendor
    assert find_by_email(db_session, "nobody@example.com") is None


@pytest.mark.asyncio
async def test_send_message_persists_before_emitting(db_session, channel, customer, vendor) -> None:
    service = MessagingService(db_session, channel)

    message = await service.send_message(customer, vendor.id, "Hello", language="en")

    assert message.id is not None
    assert message.status == "sent"
    assert message.recipient_kind == "vendor"
    events = [call.args[2] for call in channel.emit.await_args_list]
    assert events == ["new_message", "message_sent"]
    recipient_call = channel.emit.await_args_list[0]
    assert recipient_call.args[:2] == (vendor.id, "vendor")
    assert recipient_call.args[3]["id"] == message.id


@pytest.mark.asyncio
async def test_delivered_when_recipient_receives_push(db_session, channel, customer, vendor) -> None:
    channel.emit.return_value = True
    service = MessagingService(db_session, channel)

    message = await service.send_message(vendor, customer.id, "Thanks for your order")

    assert message.status == "delivered"


@pytest.mark.asyncio
async def test_push_failure_keeps_message(db_session, channel, customer, vendor) -> None:
    channel.emit.side_effect = RuntimeError("socket gone")
    service = MessagingService(db_session, channel)

    message = await service.send_message(customer, vendor.id, "Still stored")

    assert message.id is not None
    assert message.status == "sent"


@pytest.mark.asyncio
async def test_self_send_is_rejected(db_session, channel, customer) -> None:
    service = MessagingService(db_session, channel)

    with pytest.raises(InvalidRecipientError):
        await service.send_message(customer, customer.id, "Note to self")
    channel.emit.assert_not_awaited()


@pytest.mark.asyncio
async def test_admin_cannot_send(db_session, channel, admin, vendor) -> None:
    with pytest.raises(InvalidRecipientError):
        await MessagingService(db_session, channel).send_message(admin, vendor.id, "hi")


@pytest.mark.asyncio
async def test_unknown_recipient(db_session, channel, customer) -> None:
    with pytest.raises(RecipientNotFoundError):
        await MessagingService(db_session, channel).send_message(customer, "missing", "hi")
