# src/sheworks/api/v1/endpoints/messages.py
"""Messaging and translation endpoints for the SheWorks API."""

from __future__ import annotations

from collections import defaultdict

from fastapi import APIRouter, HTTPException, Query, status
from sqlalchemy import select

from sheworks.models import Customer, Message, Vendor
from sheworks.models.vendor import VENDOR_STATUS_ACTIVE
from sheworks.schemas.message import (
    ConversationList,
    ConversationPage,
    ConversationParticipant,
    ConversationResponse,
    CustomerDirectory,
    DeletedMessages,
    DirectoryEntry,
    FindRecipientRequest,
    FoundRecipient,
    MarkedRead,
    MessageCreate,
    MessageEnvelope,
    MessageResponse,
    UnreadCount,
    VendorDirectory,
    validate_language,
)
from sheworks.schemas.translation import (
    BatchTranslateRequest,
    BatchTranslateResponse,
    InterfaceTranslateRequest,
    InterfaceTranslateResponse,
    TranslatedMessage,
    TranslateRequest,
    TranslateResponse,
)
from sheworks.services import conversations
from sheworks.services.messaging import (
    InvalidRecipientError,
    MessagingService,
    RecipientNotFoundError,
    find_by_email,
)
from sheworks.services.translation import TranslationGateway

from ..dependencies import (
    CurrentParticipantDep,
    CustomerDep,
    MessagingParticipantDep,
    RealtimeChannelDep,
    SessionDep,
    TranslationGatewayDep,
    TranslationQuotaDep,
    VendorDep,
)

router = APIRouter(prefix="/messages", tags=["messages"])


async def _translations_for_viewer(
    gateway: TranslationGateway, messages: list[Message], target_lang: str
) -> dict[int, str]:
    """Translate each message into ``target_lang``, batching by source language."""
    by_language: dict[str, list[Message]] = defaultdict(list)
    for message in messages:
        by_language[message.source_language].append(message)

    translated: dict[int, str] = {}
    for source_lang, group in by_language.items():
        mapping = await gateway.translate_many(
            [message.text for message in group], source_lang, target_lang
        )
        for message in group:
            translated[message.id] = mapping.get(message.text, message.text)
    return translated


@router.post("/translate", response_model=TranslateResponse, dependencies=[TranslationQuotaDep])
async def translate_text(
    payload: TranslateRequest,
    current: CurrentParticipantDep,
    gateway: TranslationGatewayDep,
) -> TranslateResponse:
    """Translate a single text."""
    translated = await gateway.translate(payload.text, payload.from_lang, payload.to_lang)
    return TranslateResponse(
        translated_text=translated,
        original_text=payload.text,
        from_lang=payload.from_lang,
        to_lang=payload.to_lang,
    )


@router.post(
    "/translate-interface",
    response_model=InterfaceTranslateResponse,
    dependencies=[TranslationQuotaDep],
)
async def translate_interface(
    payload: InterfaceTranslateRequest,
    current: CurrentParticipantDep,
    gateway: TranslationGatewayDep,
) -> InterfaceTranslateResponse:
    """Translate a set of UI strings from one language into another."""
    translations = await gateway.translate_many(payload.texts, payload.from_lang, payload.to_lang)
    return InterfaceTranslateResponse(translations=translations)


@router.post("/translate-batch", response_model=BatchTranslateResponse)
async def translate_batch(
    payload: BatchTranslateRequest,
    current: CurrentParticipantDep,
    gateway: TranslationGatewayDep,
) -> BatchTranslateResponse:
    """Translate a list of messages into a single target language."""
    results = await gateway.translate_messages(
        [message.model_dump(by_alias=True, exclude_none=True) for message in payload.messages],
        payload.target_lang,
    )
    return BatchTranslateResponse(
        translated_messages=[
            TranslatedMessage(
                message_id=result.message_id,
                original_text=result.original_text,
                translated_text=result.translated_text,
                original_language=result.original_language,
                target_language=result.target_language,
            )
            for result in results
        ]
    )


@router.get("/conversations", response_model=ConversationList)
async def list_conversations(
    current: MessagingParticipantDep,
    db: SessionDep,
) -> ConversationList:
    """List the caller's conversations, most recently active first."""
    found = conversations.list_conversations(db, current.id)
    names = {p.id: p.name for conversation in found for p in conversation.participants if p.name}
    return ConversationList(
        conversations=[
            ConversationResponse(
                conversation_id=conversation.conversation_id,
                last_message=MessageResponse.from_model(conversation.last_message, names),
                unread_count=conversation.unread_count,
                participants=[
                    ConversationParticipant(id=p.id, name=p.name, type=p.kind)
                    for p in conversation.participants
                ],
            )
            for conversation in found
        ]
    )


@router.get("/conversation/{participant_id}", response_model=ConversationPage)
async def get_conversation(
    participant_id: str,
    current: MessagingParticipantDep,
    db: SessionDep,
    gateway: TranslationGatewayDep,
    limit: int = Query(conversations.DEFAULT_PAGE_SIZE, ge=1, le=conversations.MAX_PAGE_SIZE),
    skip: int = Query(0, ge=0),
    lang: str | None = Query(None, min_length=2, max_length=5),
) -> ConversationPage:
    """Return one page of the conversation and mark the caller's unread messages read.

    Each message carries ``translatedText`` in ``lang``, or in the caller's
    preferred language when ``lang`` is omitted.
    """
    if lang is not None:
        try:
            lang = validate_language(lang)
        except ValueError as exc:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
            ) from exc
    page = conversations.get_conversation(db, current.id, participant_id, limit=limit, offset=skip)
    target_lang = lang or current.preferred_language
    translated = await _translations_for_viewer(gateway, page, target_lang)
    names = conversations.display_names(db, {current.id, participant_id})
    return ConversationPage(
        messages=[
            MessageResponse.from_model(message, names, translated_text=translated.get(message.id))
            for message in page
        ]
    )


@router.delete("/conversation/{participant_id}", response_model=DeletedMessages)
async def delete_conversation(
    participant_id: str,
    current: MessagingParticipantDep,
    db: SessionDep,
) -> DeletedMessages:
    """Delete every message exchanged with ``participant_id``."""
    deleted = conversations.delete_conversation(db, current.id, participant_id)
    return DeletedMessages(message="Conversation deleted", deleted=deleted)


@router.post("/send", response_model=MessageEnvelope, status_code=status.HTTP_201_CREATED)
async def send_message(
    payload: MessageCreate,
    current: MessagingParticipantDep,
    db: SessionDep,
    channel: RealtimeChannelDep,
) -> MessageEnvelope:
    """Persist a message and push it to the recipient if they are connected."""
    service = MessagingService(db, channel)
    try:
        message = await service.send_message(
            current,
            payload.recipient_id,
            payload.content,
            language=payload.language,
            attachments=[attachment.model_dump(by_alias=True) for attachment in payload.attachments],
        )
    except RecipientNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except InvalidRecipientError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    names = conversations.display_names(db, {message.sender_id, message.recipient_id})
    return MessageEnvelope(message=MessageResponse.from_model(message, names))


@router.put("/read/{participant_id}", response_model=MarkedRead)
async def mark_read(
    participant_id: str,
    current: MessagingParticipantDep,
    db: SessionDep,
) -> MarkedRead:
    """Mark every unread message from ``participant_id`` as read."""
    updated = conversations.mark_conversation_read(db, current.id, participant_id)
    return MarkedRead(message="Messages marked as read", updated=updated)


@router.get("/unread-count", response_model=UnreadCount)
async def get_unread_count(current: MessagingParticipantDep, db: SessionDep) -> UnreadCount:
    return UnreadCount(unread_count=conversations.unread_count(db, current.id))


@router.get("/vendors", response_model=VendorDirectory)
async def list_vendors(current: CustomerDep, db: SessionDep) -> VendorDirectory:
    """Active, verified vendors a customer can message, best rated first."""
    vendors = db.scalars(
        select(Vendor)
        .where(Vendor.status == VENDOR_STATUS_ACTIVE, Vendor.is_verified.is_(True))
        .order_by(Vendor.rating_average.desc())
    )
    return VendorDirectory(
        vendors=[
            DirectoryEntry(
                id=vendor.id,
                name=vendor.display_name,
                type=vendor.kind,
                preferred_language=vendor.preferred_language,
                category=vendor.category,
                rating_average=vendor.rating_average,
            )
            for vendor in vendors
        ]
    )


@router.get("/customers", response_model=CustomerDirectory)
async def list_customers(current: VendorDep, db: SessionDep) -> CustomerDirectory:
    """Active customers a vendor can message, most recently seen first."""
    customers = db.scalars(
        select(Customer)
        .where(Customer.is_active.is_(True))
        .order_by(Customer.last_login.desc(), Customer.created_at.desc())
    )
    return CustomerDirectory(
        customers=[
            DirectoryEntry(
                id=customer.id,
                name=customer.display_name,
                type=customer.kind,
                preferred_language=customer.preferred_language,
            )
            for customer in customers
        ]
    )


@router.post("/find-recipient", response_model=FoundRecipient)
async def find_recipient(
    payload: FindRecipientRequest,
    current: MessagingParticipantDep,
    db: SessionDep,
) -> FoundRecipient:
    """Look a participant up by email to start a new conversation."""
    recipient = find_by_email(db, payload.email)
    if recipient is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Recipient not found")
    return FoundRecipient(id=recipient.id, type=recipient.kind)
