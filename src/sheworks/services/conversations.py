"""Conversation views derived from the flat message history.

Conversations are never stored: every call folds over the messages between
participants and recomputes the grouping.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from sqlalchemy import and_, delete, func, or_, select
from sqlalchemy.orm import Session

from sheworks.models import Customer, Message, Vendor
from sheworks.models.message import MESSAGE_STATUS_READ, UNREAD_STATUSES

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 200


def conversation_key(participant_a: str, participant_b: str) -> str:
    """Return the order-independent key for a pair of participants."""
    return "_".join(sorted((str(participant_a), str(participant_b))))


@dataclass
class ConversationParticipantInfo:
    """A participant seen in a conversation."""

    id: str
    kind: str
    name: str | None = None


@dataclass
class Conversation:
    """Grouping of every message between two participants."""

    conversation_id: str
    last_message: Message
    unread_count: int = 0
    participants: list[ConversationParticipantInfo] = field(default_factory=list)

    def add_participant(self, participant_id: str, kind: str) -> None:
        if all(existing.id != participant_id for existing in self.participants):
            self.participants.append(ConversationParticipantInfo(id=participant_id, kind=kind))


def _pair_filter(participant_a: str, participant_b: str):  # type: ignore[no-untyped-def]
    return or_(
        and_(Message.sender_id == participant_a, Message.recipient_id == participant_b),
        and_(Message.sender_id == participant_b, Message.recipient_id == participant_a),
    )


def _newest_first():  # type: ignore[no-untyped-def]
    return (Message.created_at.desc(), Message.id.desc())


def display_names(db: Session, participant_ids: set[str]) -> dict[str, str]:
    """Resolve display names for a set of customer and vendor ids."""
    if not participant_ids:
        return {}
    names: dict[str, str] = {}
    for customer in db.scalars(select(Customer).where(Customer.id.in_(participant_ids))):
        names[customer.id] = customer.display_name
    for vendor in db.scalars(select(Vendor).where(Vendor.id.in_(participant_ids))):
        names.setdefault(vendor.id, vendor.display_name)
    return names


def list_conversations(db: Session, participant_id: str) -> list[Conversation]:
    """Group every message involving ``participant_id`` into conversations.

    Messages are read newest first, so the first message seen for a key is the
    conversation's most recent one, and the result comes out ordered by that
    message, newest conversation first.
    """
    messages = db.scalars(
        select(Message)
        .where(or_(Message.sender_id == participant_id, Message.recipient_id == participant_id))
        .order_by(*_newest_first())
    ).all()

    conversations: dict[str, Conversation] = {}
    for message in messages:
        key = conversation_key(message.sender_id, message.recipient_id)
        conversation = conversations.get(key)
        if conversation is None:
            conversation = Conversation(conversation_id=key, last_message=message)
            conversations[key] = conversation

        conversation.add_participant(message.sender_id, message.sender_kind)
        conversation.add_participant(message.recipient_id, message.recipient_kind)

        if message.recipient_id == participant_id and message.status != MESSAGE_STATUS_READ:
            conversation.unread_count += 1

    names = display_names(
        db, {p.id for conversation in conversations.values() for p in conversation.participants}
    )
    for conversation in conversations.values():
        for participant in conversation.participants:
            participant.name = names.get(participant.id)

    # Keys were first seen in newest-first order, so insertion order is already
    # "most recent conversation first".
    return list(conversations.values())


def get_conversation(
    db: Session,
    viewer_id: str,
    peer_id: str,
    limit: int = DEFAULT_PAGE_SIZE,
    offset: int = 0,
) -> list[Message]:
    """Return one page of the pair's history in chronological order.

    The page is selected newest first. Every message on it addressed to the
    viewer that is not yet read is marked read, one row at a time.
    """
    limit = max(1, min(int(limit), MAX_PAGE_SIZE))
    offset = max(0, int(offset))

    page = db.scalars(
        select(Message)
        .where(_pair_filter(viewer_id, peer_id))
        .order_by(*_newest_first())
        .limit(limit)
        .offset(offset)
    ).all()

    marked = False
    for message in page:
        if message.recipient_id == viewer_id and message.status != MESSAGE_STATUS_READ:
            message.mark_read()
            marked = True
    if marked:
        db.commit()

    return list(reversed(page))


def mark_conversation_read(db: Session, viewer_id: str, peer_id: str) -> int:
    """Mark every unread message from ``peer_id`` to ``viewer_id`` as read."""
    unread = db.scalars(
        select(Message).where(
            _pair_filter(viewer_id, peer_id),
            Message.recipient_id == viewer_id,
            Message.status.in_(UNREAD_STATUSES),
        )
    ).all()
    for message in unread:
        message.mark_read()
    if unread:
        db.commit()
    return len(unread)


def unread_count(db: Session, participant_id: str) -> int:
    """Count messages addressed to ``participant_id`` that are sent or delivered."""
    return int(
        db.scalar(
            select(func.count())
            .select_from(Message)
            .where(Message.recipient_id == participant_id, Message.status.in_(UNREAD_STATUSES))
        )
        or 0
    )


def delete_conversation(db: Session, viewer_id: str, peer_id: str) -> int:
    """Delete the pair's entire message history and return the number of rows removed."""
    result = db.execute(delete(Message).where(_pair_filter(viewer_id, peer_id)))
    db.commit()
    return int(result.rowcount or 0)
