"""Sending messages between customers and vendors.

Both the REST endpoint and the realtime channel go through
:class:`MessagingService` so a message is always persisted before anyone is
told about it.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Union

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from sheworks.models import Admin, Customer, Message, Vendor
from sheworks.models.message import MESSAGE_STATUS_SENT
from sheworks.schemas.message import MessageResponse

if TYPE_CHECKING:
    from sheworks.services.realtime import RealtimeChannel

# Configure logger for this module
logger = logging.getLogger(__name__)

Participant = Union[Customer, Vendor, Admin]

_MODELS: dict[str, type[Customer] | type[Vendor] | type[Admin]] = {
    "customer": Customer,
    "vendor": Vendor,
    "admin": Admin,
}


class RecipientNotFoundError(LookupError):
    """Raised when no customer or vendor carries the requested id."""


class InvalidRecipientError(ValueError):
    """Raised when a message cannot be addressed to the requested participant."""


def load_participant(db: Session, participant_id: str, kind: str) -> Participant | None:
    """Load a participant of a known kind."""
    model = _MODELS.get(kind)
    if model is None:
        return None
    return db.get(model, participant_id)


def resolve_participant(db: Session, participant_id: str) -> Customer | Vendor | None:
    """Find a message participant by id alone.

    Customers are looked up first, then vendors. Ids are independent UUIDs so the
    two tables never share one.
    """
    customer = db.get(Customer, participant_id)
    if customer is not None:
        return customer
    return db.get(Vendor, participant_id)


def find_by_email(db: Session, email: str) -> Customer | Vendor | None:
    """Find a customer, then a vendor, by case-insensitive email."""
    normalised = email.strip().lower()
    customer = db.scalar(select(Customer).where(func.lower(Customer.email) == normalised))
    if customer is not None:
        return customer
    return db.scalar(select(Vendor).where(func.lower(Vendor.email) == normalised))


class MessagingService:
    """Persist a message, then push it to whoever is online."""

    def __init__(self, db: Session, channel: RealtimeChannel) -> None:
        self.db = db
        self.channel = channel

    async def send_message(
        self,
        sender: Participant,
        recipient_id: str,
        text: str,
        language: str = "en",
        attachments: list[dict[str, Any]] | None = None,
    ) -> Message:
        """Store a message from ``sender`` to ``recipient_id`` and fan it out.

        Args:
            sender: The authenticated customer or vendor.
            recipient_id: Id of the customer or vendor receiving the message.
            text: Message body.
            language: Two-letter language the body is written in.
            attachments: Optional attachment descriptors.

        Returns:
            The persisted message; its status is ``delivered`` if the recipient
            was online and the push succeeded, ``sent`` otherwise.

        Raises:
            InvalidRecipientError: If the sender addresses themselves or is not
                a customer or vendor.
            RecipientNotFoundError: If no participant carries ``recipient_id``.
        """
        if sender.kind not in ("customer", "vendor"):
            raise InvalidRecipientError("Only customers and vendors can send messages")
        if recipient_id == sender.id:
            raise InvalidRecipientError("Cannot send a message to yourself")

        recipient = resolve_participant(self.db, recipient_id)
        if recipient is None:
            raise RecipientNotFoundError("Recipient not found")

        message = Message(
            sender_id=sender.id,
            sender_kind=sender.kind,
            recipient_id=recipient.id,
            recipient_kind=recipient.kind,
            text=text,
            source_language=language,
            attachments=list(attachments or []),
            status=MESSAGE_STATUS_SENT,
        )
        self.db.add(message)
        self.db.commit()
        self.db.refresh(message)

        await self._fan_out(message, sender, recipient)
        return message

    async def _fan_out(self, message: Message, sender: Participant, recipient: Participant) -> None:
        names = {sender.id: sender.display_name, recipient.id: recipient.display_name}
        try:
            delivered = await self.channel.emit(
                recipient.id,
                recipient.kind,
                "new_message",
                MessageResponse.from_model(message, names).event_payload(),
            )
            if delivered:
                message.mark_delivered()
                self.db.commit()
            await self.channel.emit(
                sender.id,
                sender.kind,
                "message_sent",
                MessageResponse.from_model(message, names).event_payload(),
            )
        except Exception as exc:  # the message is already stored
            logger.warning("Live delivery of message %s failed: %s", message.id, exc)
