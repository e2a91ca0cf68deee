# src/sheworks/schemas/translation.py
"""Translation request and response schemas."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from .common import CamelModel
from .message import LanguageCode


class TranslateRequest(CamelModel):
    """Body of ``POST /messages/translate``."""

    text: str = Field(..., min_length=1, max_length=5000)
    from_lang: LanguageCode
    to_lang: LanguageCode


class TranslateResponse(CamelModel):
    translated_text: str
    original_text: str
    from_lang: str
    to_lang: str


class InterfaceTranslateRequest(CamelModel):
    """Body of ``POST /messages/translate-interface``: UI strings in one language."""

    texts: list[str] = Field(..., min_length=1, max_length=500)
    from_lang: LanguageCode = "en"
    to_lang: LanguageCode


class InterfaceTranslateResponse(CamelModel):
    """``{source string: translated string}``."""

    translations: dict[str, str]


class BatchMessageContent(CamelModel):
    text: str | None = Field(default=None, max_length=5000)
    language: LanguageCode | None = None


class BatchMessage(CamelModel):
    """One message to translate: flat ``text``/``language`` or nested ``content``."""

    id: str | int | None = None
    legacy_id: str | int | None = Field(default=None, alias="_id")
    text: str | None = Field(default=None, max_length=5000)
    language: LanguageCode | None = None
    content: BatchMessageContent | None = None


class BatchTranslateRequest(CamelModel):
    """Body of ``POST /messages/translate-batch``."""

    messages: list[BatchMessage] = Field(..., max_length=500)
    target_lang: LanguageCode


class TranslatedMessage(CamelModel):
    message_id: Any = None
    original_text: str
    translated_text: str
    original_language: str
    target_language: str


class BatchTranslateResponse(CamelModel):
    translated_messages: list[TranslatedMessage]
