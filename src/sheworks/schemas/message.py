# src/sheworks/schemas/message.py
"""Message and conversation schemas."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Annotated, Any, Literal

from pydantic import AfterValidator, Field

from sheworks.models import Message
from sheworks.models.message import MESSAGE_MAX_LENGTH
from sheworks.services.conversations import conversation_key
from sheworks.services.translation import SUPPORTED_LANGUAGES

from .common import CamelModel


def validate_language(value: str) -> str:
    """Normalise and validate a two-letter interface language code."""
    code = value.strip().lower()
    if code not in SUPPORTED_LANGUAGES:
        raise ValueError(f"Unsupported language: {value}")
    return code


LanguageCode = Annotated[str, AfterValidator(validate_language)]


class Attachment(CamelModel):
    """File or product reference attached to a message."""

    type: Literal["image", "file", "product"]
    url: str | None = None
    filename: str | None = None
    size: int | None = None
    mime_type: str | None = None


class MessageCreate(CamelModel):
    """Body of ``POST /messages/send``."""

    recipient_id: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1, max_length=MESSAGE_MAX_LENGTH)
    language: LanguageCode = "en"
    attachments: list[Attachment] = Field(default_factory=list)


class ParticipantRef(CamelModel):
    """One side of a message."""

    participant_id: str
    participant_kind: str
    role: str
    name: str | None = None


class MessageResponse(CamelModel):
    """A message as rendered to clients and realtime subscribers."""

    id: int
    conversation_id: str
    sender: ParticipantRef
    recipient: ParticipantRef
    text: str
    source_language: str
    translated_text: str | None = None
    attachments: list[dict[str, Any]] = Field(default_factory=list)
    status: str
    read_at: datetime | None = None
    created_at: datetime

    @classmethod
    def from_model(
        cls,
        message: Message,
        names: Mapping[str, str] | None = None,
        translated_text: str | None = None,
    ) -> MessageResponse:
        """Build the response from a persisted message.

        Args:
            message: The stored message.
            names: Optional ``{participant_id: display name}`` lookup.
            translated_text: Viewer-specific translation overriding the stored one.
        """
        lookup = names or {}
        return cls(
            id=message.id,
            conversation_id=conversation_key(message.sender_id, message.recipient_id),
            sender=ParticipantRef(
                participant_id=message.sender_id,
                participant_kind=message.sender_kind,
                role=message.sender_kind,
                name=lookup.get(message.sender_id),
            ),
            recipient=ParticipantRef(
                participant_id=message.recipient_id,
                participant_kind=message.recipient_kind,
                role=message.recipient_kind,
                name=lookup.get(message.recipient_id),
            ),
            text=message.text,
            source_language=message.source_language,
            translated_text=translated_text if translated_text is not None else message.translated_text,
            attachments=list(message.attachments or []),
            status=message.status,
            read_at=message.read_at,
            created_at=message.created_at,
        )

    def event_payload(self) -> dict[str, Any]:
        """Return the JSON-ready form pushed over the realtime channel."""
        return self.model_dump(by_alias=True, mode="json")


class MessageEnvelope(CamelModel):
    """Wrapper for a single message response."""

    message: MessageResponse


class ConversationParticipant(CamelModel):
    """A participant listed on a conversation."""

    id: str
    name: str | None = None
    type: str


class ConversationResponse(CamelModel):
    """Derived per-pair conversation summary."""

    conversation_id: str
    last_message: MessageResponse
    unread_count: int
    participants: list[ConversationParticipant]


class ConversationList(CamelModel):
    """Response of ``GET /messages/conversations``."""

    conversations: list[ConversationResponse]


class ConversationPage(CamelModel):
    """Response of ``GET /messages/conversation/{participant_id}``."""

    messages: list[MessageResponse]


class UnreadCount(CamelModel):
    """Unread counter."""

    unread_count: int


class MarkedRead(CamelModel):
    """Result of bulk read-marking."""

    message: str
    updated: int


class DeletedMessages(CamelModel):
    """Result of deleting a conversation."""

    message: str
    deleted: int


class FindRecipientRequest(CamelModel):
    """Body of ``POST /messages/find-recipient``."""

    email: str


class FoundRecipient(CamelModel):
    """Participant located by email."""

    id: str
    type: str


class DirectoryEntry(CamelModel):
    """A participant someone can start a conversation with."""

    id: str
    name: str
    type: str
    preferred_language: str = "en"
    category: str | None = None
    rating_average: float | None = None


class VendorDirectory(CamelModel):
    vendors: list[DirectoryEntry]


class CustomerDirectory(CamelModel):
    customers: list[DirectoryEntry]
