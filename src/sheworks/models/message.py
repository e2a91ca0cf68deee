# src/sheworks/models/message.py
"""Direct messages exchanged between customers and vendors."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, CheckConstraint, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from sheworks.db.session import Base
from sheworks.db.time import utcnow

MESSAGE_STATUS_SENT = "sent"
MESSAGE_STATUS_DELIVERED = "delivered"
MESSAGE_STATUS_READ = "read"
UNREAD_STATUSES = (MESSAGE_STATUS_SENT, MESSAGE_STATUS_DELIVERED)

MESSAGE_MAX_LENGTH = 2000


class Message(Base):
    """A persisted chat message.

    Immutable after creation except for ``status``, ``read_at`` and
    ``translated_text``.
    """

    __tablename__ = "message"
    __table_args__ = (
        CheckConstraint("sender_id <> recipient_id", name="ck_message_distinct_participants"),
        Index("ix_message_pair_created", "sender_id", "recipient_id", "created_at"),
        Index("ix_message_recipient_status", "recipient_id", "status"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    sender_id: Mapped[str] = mapped_column(String(32), nullable=False)
    sender_kind: Mapped[str] = mapped_column(String(16), nullable=False)
    recipient_id: Mapped[str] = mapped_column(String(32), nullable=False)
    recipient_kind: Mapped[str] = mapped_column(String(16), nullable=False)

    text: Mapped[str] = mapped_column(Text, nullable=False)
    source_language: Mapped[str] = mapped_column(String(5), nullable=False, default="en")
    translated_text: Mapped[str | None] = mapped_column(Text, nullable=True)
    attachments: Mapped[list[Any]] = mapped_column(JSON, nullable=False, default=list)

    status: Mapped[str] = mapped_column(String(16), nullable=False, default=MESSAGE_STATUS_SENT)
    read_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    def mark_read(self) -> None:
        """Move the message to ``read`` and stamp ``read_at``."""
        self.status = MESSAGE_STATUS_READ
        self.read_at = utcnow()

    def mark_delivered(self) -> None:
        """Move a ``sent`` message to ``delivered``; later states are kept."""
        if self.status == MESSAGE_STATUS_SENT:
            self.status = MESSAGE_STATUS_DELIVERED
