# tests/services/test_conversations.py
"""Tests for conversation grouping and read accounting."""

from datetime import timedelta

from sheworks.db.time import utcnow
from sheworks.models import Message
from sheworks.services.conversations import (
    conversation_key,
    delete_conversation,
    get_conversation,
    list_conversations,
    mark_conversation_read,
    unread_count,
)


def _message(db_session, sender, recipient, text, minutes_ago=0, status="sent"):
    message = Message(
        sender_id=sender.id,
        sender_kind=sender.kind,
        recipient_id=recipient.id,
        recipient_kind=recipient.kind,
        text=text,
        source_language=sender.preferred_language,
        status=status,
        created_at=utcnow() - timedelta(minutes=minutes_ago),
    )
    db_session.add(message)
    db_session.flush()
    return message


def test_conversation_key_is_order_independent() -> None:
    assert conversation_key("b", "a") == conversation_key("a", "b") == "a_b"


def test_list_conversations_groups_and_counts_unread(
    db_session, customer, vendor, other_vendor
) -> None:
    _message(db_session, customer, vendor, "Is this necklace available?", minutes_ago=30)
    _message(db_session, vendor, customer, "Yes, two left.", minutes_ago=20)
    _message(db_session, vendor, customer, "Shall I reserve one?", minutes_ago=10)
    _message(db_session, other_vendor, customer, "Welcome!", minutes_ago=5, status="read")

    conversations = list_conversations(db_session, customer.id)

    assert [c.conversation_id for c in conversations] == [
        conversation_key(customer.id, other_vendor.id),
        conversation_key(customer.id, vendor.id),
    ]
    with_vendor = conversations[1]
    assert with_vendor.unread_count == 2
    assert with_vendor.last_message.text == "Shall I reserve one?"
    names = {p.id: p.name for p in with_vendor.participants}
    assert names == {customer.id: "Amara Diallo", vendor.id: "Atelier Amani"}
    assert conversations[0].unread_count == 0


def test_sender_side_does_not_count_own_messages(db_session, customer, vendor) -> None:
    _message(db_session, customer, vendor, "Hello")

    conversations = list_conversations(db_session, customer.id)
    assert conversations[0].unread_count == 0
    assert unread_count(db_session, vendor.id) == 1


def test_get_conversation_is_chronological_and_marks_read(db_session, customer, vendor) -> None:
    _message(db_session, customer, vendor, "first", minutes_ago=3)
    _message(db_session, vendor, customer, "second", minutes_ago=2)
    _message(db_session, vendor, customer, "third", minutes_ago=1, status="delivered")

    page = get_conversation(db_session, customer.id, vendor.id)

    assert [m.text for m in page] == ["first", "second", "third"]
    assert [m.status for m in page] == ["sent", "read", "read"]
    assert all(m.read_at is not None for m in page[1:])
    assert unread_count(db_session, customer.id) == 0
    assert unread_count(db_session, vendor.id) == 1


def test_get_conversation_pages_newest_first(db_session, customer, vendor) -> None:
    for i in range(5):
        _message(db_session, vendor, customer, f"m{i}", minutes_ago=10 - i)

    page = get_conversation(db_session, customer.id, vendor.id, limit=2, offset=1)

    assert [m.text for m in page] == ["m2", "m3"]
    # Only the messages on the page are marked read.
    assert unread_count(db_session, customer.id) == 3


def test_mark_conversation_read_only_touches_one_peer(
    db_session, customer, vendor, other_vendor
) -> None:
    _message(db_session, vendor, customer, "a")
    _message(db_session, vendor, customer, "b", status="delivered")
    _message(db_session, other_vendor, customer, "c")

    assert mark_conversation_read(db_session, customer.id, vendor.id) == 2
    assert unread_count(db_session, customer.id) == 1


def test_delete_conversation_removes_both_directions(
    db_session, customer, vendor, other_vendor
) -> None:
    _message(db_session, customer, vendor, "a")
    _message(db_session, vendor, customer, "b")
    _message(db_session, other_vendor, customer, "c")

    assert delete_conversation(db_session, customer.id, vendor.id) == 2
    remaining = list_conversations(db_session, customer.id)
    assert [c.conversation_id for c in remaining] == [conversation_key(customer.id, other_vendor.id)]
