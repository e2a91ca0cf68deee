"""Message and interface translation.

This module provides the TranslationGateway used by the messaging API. It
includes:

- Provider adapters for DeepL (primary, paid) and MyMemory (free fallback)
- A bounded, TTL-based translation cache with an optional Redis backend
- Batch helpers that fan out over a fixed-size worker pool

Provider failures are never surfaced to callers: when every provider fails the
original text is returned unchanged.
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from collections import OrderedDict
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Protocol

import httpx

from sheworks.core.settings import settings

# Configure logger for this module
logger = logging.getLogger(__name__)

SUPPORTED_LANGUAGES: tuple[str, ...] = (
    "en", "ur", "ar", "es", "fr", "de", "it", "pt",
    "ru", "zh", "ja", "ko", "hi", "bn", "tr", "nl",
)

# DeepL does not support ur, hi or bn; those requests fail at DeepL and are
# picked up by the fallback provider.
DEEPL_LANGUAGE_CODES: dict[str, str] = {code: code.upper() for code in SUPPORTED_LANGUAGES}
DEEPL_DEFAULT_CODE = "EN"

MYMEMORY_WARNING_PREFIX = "MYMEMORY WARNING"


class TranslationError(RuntimeError):
    """Raised by a provider when it cannot produce a translation."""


def map_deepl_language(code: str) -> str:
    """Map an interface language code to the code DeepL expects."""
    return DEEPL_LANGUAGE_CODES.get(code.lower(), DEEPL_DEFAULT_CODE)


class TranslationProvider(Protocol):
    """A remote translation API."""

    name: str

    @property
    def enabled(self) -> bool: ...

    async def translate(self, text: str, source_lang: str, target_lang: str) -> str: ...


class DeepLProvider:
    """Primary provider backed by the DeepL REST API."""

    name = "deepl"

    def __init__(self, client: httpx.AsyncClient, api_key: str | None, api_url: str) -> None:
        self._client = client
        self._api_key = api_key
        self._api_url = api_url

    @property
    def enabled(self) -> bool:
        return bool(self._api_key)

    async def translate(self, text: str, source_lang: str, target_lang: str) -> str:
        if not self._api_key:
            raise TranslationError("DeepL API key not configured")

        try:
            response = await self._client.post(
                self._api_url,
                headers={"Authorization": f"DeepL-Auth-Key {self._api_key}"},
                data={
                    "text": text,
                    "source_lang": map_deepl_language(source_lang),
                    "target_lang": map_deepl_language(target_lang),
                },
            )
        except httpx.HTTPError as exc:
            raise TranslationError(f"DeepL request failed: {exc}") from exc

        if not response.is_success:
            raise TranslationError(f"DeepL responded with {response.status_code}")

        try:
            translations = response.json().get("translations") or []
            translated = translations[0].get("text") if translations else None
        except (ValueError, AttributeError) as exc:
            raise TranslationError("DeepL returned a malformed body") from exc

        if not translated:
            raise TranslationError("DeepL returned no translation")
        return str(translated)


class MyMemoryProvider:
    """Free fallback provider backed by the MyMemory API."""

    name = "mymemory"

    def __init__(self, client: httpx.AsyncClient, api_url: str) -> None:
        self._client = client
        self._api_url = api_url

    @property
    def enabled(self) -> bool:
        return True

    async def translate(self, text: str, source_lang: str, target_lang: str) -> str:
        try:
            response = await self._client.get(
                self._api_url,
                params={"q": text, "langpair": f"{source_lang}|{target_lang}"},
            )
        except httpx.HTTPError as exc:
            raise TranslationError(f"MyMemory request failed: {exc}") from exc

        if not response.is_success:
            raise TranslationError(f"MyMemory responded with {response.status_code}")

        try:
            body = response.json()
            reported_status = str(body.get("responseStatus", 200))
            translated = (body.get("responseData") or {}).get("translatedText")
        except (ValueError, AttributeError) as exc:
            raise TranslationError("MyMemory returned a malformed body") from exc

        # Quota and language-pair errors arrive as HTTP 200 with the warning in
        # place of the translation.
        if reported_status != "200":
            raise TranslationError(f"MyMemory reported status {reported_status}: {translated}")
        if translated and str(translated).upper().startswith(MYMEMORY_WARNING_PREFIX):
            raise TranslationError(f"MyMemory warning: {translated}")
        if not translated:
            raise TranslationError("MyMemory returned no translation")
        return str(translated)


# --- Cache stores ---------------------------------------------------------------


class TranslationCache(Protocol):
    """Store for translated strings keyed by (text, source, target)."""

    def get(self, text: str, source_lang: str, target_lang: str) -> str | None: ...

    def set(self, text: str, source_lang: str, target_lang: str, translated: str) -> None: ...


@dataclass
class _CacheEntry:
    translated_text: str
    cached_at: float


class InMemoryTranslationCache:
    """Bounded LRU cache with a fixed time-to-live.

    Expired entries are dropped when read, and swept whenever an insert would
    push the cache past ``max_entries``; if the cache is still full after the
    sweep the least recently used entry is evicted.
    """

    def __init__(
        self,
        ttl_seconds: float,
        max_entries: int,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = float(ttl_seconds)
        self.max_entries = max(1, int(max_entries))
        self._clock = clock
        self._entries: OrderedDict[tuple[str, str, str], _CacheEntry] = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def _expired(self, entry: _CacheEntry, now: float) -> bool:
        return now - entry.cached_at >= self.ttl_seconds

    def get(self, text: str, source_lang: str, target_lang: str) -> str | None:
        key = (text, source_lang, target_lang)
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._expired(entry, self._clock()):
            del self._entries[key]
            return None
        self._entries.move_to_end(key)
        return entry.translated_text

    def set(self, text: str, source_lang: str, target_lang: str, translated: str) -> None:
        key = (text, source_lang, target_lang)
        now = self._clock()
        self._entries[key] = _CacheEntry(translated_text=translated, cached_at=now)
        self._entries.move_to_end(key)
        if len(self._entries) > self.max_entries:
            self.sweep(now)
        while len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)

    def sweep(self, now: float | None = None) -> int:
        """Remove every expired entry and return how many were dropped."""
        current = self._clock() if now is None else now
        stale = [key for key, entry in self._entries.items() if self._expired(entry, current)]
        for key in stale:
            del self._entries[key]
        return len(stale)


class RedisTranslationCache:
    """Translation cache shared between processes through Redis."""

    def __init__(self, client: Any, ttl_seconds: int, prefix: str = "translation") -> None:
        self._redis = client
        self.ttl_seconds = int(ttl_seconds)
        self._prefix = prefix

    def _key(self, text: str, source_lang: str, target_lang: str) -> str:
        return f"{self._prefix}:{source_lang}:{target_lang}:{json.dumps(text)}"

    def get(self, text: str, source_lang: str, target_lang: str) -> str | None:
        value = self._redis.get(self._key(text, source_lang, target_lang))
        if value is None:
            return None
        return value.decode() if isinstance(value, bytes) else str(value)

    def set(self, text: str, source_lang: str, target_lang: str, translated: str) -> None:
        self._redis.setex(self._key(text, source_lang, target_lang), self.ttl_seconds, translated)


# --- Gateway --------------------------------------------------------------------


@dataclass(frozen=True)
class MessageTranslation:
    """Per-message result of a batch translation."""

    message_id: Any
    original_text: str
    translated_text: str
    original_language: str
    target_language: str


class TranslationGateway:
    """Translate text through an ordered chain of providers with caching."""

    def __init__(
        self,
        providers: Sequence[TranslationProvider],
        cache: TranslationCache,
        *,
        batch_concurrency: int = 4,
        batch_delay_seconds: float = 0.0,
    ) -> None:
        self.providers = list(providers)
        self.cache = cache
        self.batch_concurrency = max(1, int(batch_concurrency))
        self.batch_delay_seconds = max(0.0, float(batch_delay_seconds))

    async def translate(self, text: str, source_lang: str, target_lang: str) -> str:
        """Translate ``text`` or return it unchanged when no provider succeeds."""
        if not text or source_lang == target_lang:
            return text

        cached = self.cache.get(text, source_lang, target_lang)
        if cached is not None:
            return cached

        for provider in self.providers:
            if not provider.enabled:
                continue
            try:
                translated = await provider.translate(text, source_lang, target_lang)
            except TranslationError as exc:
                logger.warning(
                    "Translation provider %s failed (%s->%s): %s",
                    provider.name,
                    source_lang,
                    target_lang,
                    exc,
                )
                continue
            self.cache.set(text, source_lang, target_lang, translated)
            return translated

        logger.warning("All translation providers failed (%s->%s)", source_lang, target_lang)
        return text

    async def _translate_politely(
        self, semaphore: asyncio.Semaphore, text: str, source_lang: str, target_lang: str
    ) -> str:
        async with semaphore:
            result = await self.translate(text, source_lang, target_lang)
            if self.batch_delay_seconds:
                await asyncio.sleep(self.batch_delay_seconds)
            return result

    async def translate_many(
        self, texts: Iterable[str], source_lang: str, target_lang: str
    ) -> dict[str, str]:
        """Translate distinct strings and return a ``{text: translation}`` map."""
        unique = list(dict.fromkeys(texts))
        if not unique:
            return {}
        semaphore = asyncio.Semaphore(self.batch_concurrency)
        results = await asyncio.gather(
            *(self._translate_politely(semaphore, text, source_lang, target_lang) for text in unique)
        )
        return dict(zip(unique, results, strict=True))

    async def translate_messages(
        self, messages: Iterable[Mapping[str, Any]], target_lang: str
    ) -> list[MessageTranslation]:
        """Translate message payloads into ``target_lang``.

        Each mapping needs ``id`` (or ``_id``), ``text`` and ``language``;
        the nested ``content: {text, language}`` shape is also accepted.
        """
        items = [_normalise_message(message) for message in messages]
        semaphore = asyncio.Semaphore(self.batch_concurrency)

        async def _one(message_id: Any, text: str, language: str) -> MessageTranslation:
            if language == target_lang or not text:
                translated = text
            else:
                translated = await self._translate_politely(semaphore, text, language, target_lang)
            return MessageTranslation(
                message_id=message_id,
                original_text=text,
                translated_text=translated,
                original_language=language,
                target_language=target_lang,
            )

        return list(await asyncio.gather(*(_one(*item) for item in items)))


def _normalise_message(message: Mapping[str, Any]) -> tuple[Any, str, str]:
    content = message.get("content")
    if not isinstance(content, Mapping):
        content = {}
    message_id = message.get("id", message.get("_id"))
    text = message.get("text") or content.get("text") or ""
    language = message.get("language") or content.get("language") or "en"
    return message_id, str(text), str(language)


def build_translation_gateway(
    client: httpx.AsyncClient, cache: TranslationCache
) -> TranslationGateway:
    """Build the gateway from application settings.

    Without ``DEEPL_API_KEY`` the primary provider is disabled and every
    request goes straight to the fallback.
    """
    providers: list[TranslationProvider] = [
        DeepLProvider(client, settings.deepl_api_key, settings.deepl_api_url),
        MyMemoryProvider(client, settings.mymemory_api_url),
    ]
    return TranslationGateway(
        providers,
        cache,
        batch_concurrency=settings.translation_batch_concurrency,
        batch_delay_seconds=settings.translation_batch_delay_seconds,
    )
