# tests/services/test_translation.py
"""Tests for the translation gateway, its cache and the provider adapters."""

import httpx
import pytest

from sheworks.services.translation import (
    DeepLProvider,
    InMemoryTranslationCache,
    MyMemoryProvider,
    TranslationGateway,
    map_deepl_language,
)


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.mark.asyncio
async def test_same_language_skips_providers(translation_gateway, fake_provider) -> None:
    assert await translation_gateway.translate("Hello", "en", "en") == "Hello"
    assert fake_provider.calls == []


@pytest.mark.asyncio
async def test_empty_text_is_returned_unchanged(translation_gateway, fake_provider) -> None:
    assert await translation_gateway.translate("", "en", "fr") == ""
    assert fake_provider.calls == []


@pytest.mark.asyncio
async def test_second_request_is_served_from_cache(translation_gateway, fake_provider) -> None:
    first = await translation_gateway.translate("Hello", "en", "fr")
    second = await translation_gateway.translate("Hello", "en", "fr")

    assert first == second == "[fr] Hello"
    assert len(fake_provider.calls) == 1


@pytest.mark.asyncio
async def test_cache_entries_expire_after_ttl(make_provider) -> None:
    clock = FakeClock()
    provider = make_provider()
    gateway = TranslationGateway([provider], InMemoryTranslationCache(60, 10, clock=clock))

    await gateway.translate("Hello", "en", "fr")
    clock.now += 59
    await gateway.translate("Hello", "en", "fr")
    assert len(provider.calls) == 1

    clock.now += 1
    await gateway.translate("Hello", "en", "fr")
    assert len(provider.calls) == 2


@pytest.mark.asyncio
async def test_falls_back_to_next_provider(make_provider) -> None:
    primary = make_provider("primary", fail=True)
    fallback = make_provider("fallback")
    gateway = TranslationGateway([primary, fallback], InMemoryTranslationCache(60, 10))

    assert await gateway.translate("Hello", "en", "es") == "[es] Hello"
    assert len(primary.calls) == 1
    assert len(fallback.calls) == 1


@pytest.mark.asyncio
async def test_disabled_provider_is_skipped(make_provider) -> None:
    primary = make_provider("primary", enabled=False)
    fallback = make_provider("fallback")
    gateway = TranslationGateway([primary, fallback], InMemoryTranslationCache(60, 10))

    await gateway.translate("Hello", "en", "es")
    assert primary.calls == []
    assert len(fallback.calls) == 1


@pytest.mark.asyncio
async def test_all_providers_failing_returns_original(make_provider) -> None:
    cache = InMemoryTranslationCache(60, 10)
    gateway = TranslationGateway(
        [make_provider("a", fail=True), make_provider("b", fail=True)], cache
    )

    assert await gateway.translate("Hello", "en", "de") == "Hello"
    # Failures are not cached so a later request can still succeed.
    assert cache.get("Hello", "en", "de") is None


@pytest.mark.asyncio
async def test_translate_many_deduplicates(translation_gateway, fake_provider) -> None:
    result = await translation_gateway.translate_many(["Buy", "Sell", "Buy"], "en", "fr")

    assert result == {"Buy": "[fr] Buy", "Sell": "[fr] Sell"}
    assert len(fake_provider.calls) == 2


@pytest.mark.asyncio
async def test_translate_many_empty(translation_gateway) -> None:
    assert await translation_gateway.translate_many([], "en", "fr") == {}


@pytest.mark.asyncio
async def test_translate_messages_keeps_order_and_skips_target_language(
    translation_gateway, fake_provider
) -> None:
    results = await translation_gateway.translate_messages(
        [
            {"id": 1, "text": "Bonjour", "language": "fr"},
            {"_id": "b", "content": {"text": "Hola", "language": "es"}},
            {"id": 3, "text": "Hi", "language": "en"},
        ],
        "en",
    )

    assert [r.message_id for r in results] == [1, "b", 3]
    assert results[0].translated_text == "[en] Bonjour"
    assert results[1].original_language == "es"
    assert results[1].translated_text == "[en] Hola"
    assert results[2].translated_text == "Hi"
    assert len(fake_provider.calls) == 2


@pytest.mark.asyncio
async def test_translate_messages_ignores_non_mapping_content(translation_gateway) -> None:
    results = await translation_gateway.translate_messages(
        [{"id": 1, "content": "hi"}], "fr"
    )

    assert results[0].original_text == ""
    assert results[0].translated_text == ""


def test_cache_evicts_least_recently_used() -> None:
    cache = InMemoryTranslationCache(ttl_seconds=60, max_entries=2)
    cache.set("a", "en", "fr", "A")
    cache.set("b", "en", "fr", "B")
    assert cache.get("a", "en", "fr") == "A"

    cache.set("c", "en", "fr", "C")

    assert len(cache) == 2
    assert cache.get("b", "en", "fr") is None
    assert cache.get("a", "en", "fr") == "A"
    assert cache.get("c", "en", "fr") == "C"


def test_cache_sweep_drops_expired_entries() -> None:
    clock = FakeClock()
    cache = InMemoryTranslationCache(ttl_seconds=10, max_entries=5, clock=clock)
    cache.set("a", "en", "fr", "A")
    clock.now += 5
    cache.set("b", "en", "fr", "B")
    clock.now += 6

    assert cache.sweep() == 1
    assert len(cache) == 1


def test_deepl_language_mapping() -> None:
    assert map_deepl_language("fr") == "FR"
    assert map_deepl_language("ZH") == "ZH"
    assert map_deepl_language("xx") == "EN"


@pytest.mark.asyncio
async def test_deepl_provider_parses_response() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers["Authorization"]
        seen["body"] = request.content.decode()
        return httpx.Response(200, json={"translations": [{"text": "Bonjour"}]})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        provider = DeepLProvider(client, "key-123", "https://deepl.test/v2/translate")
        assert provider.enabled
        assert await provider.translate("Hello", "en", "fr") == "Bonjour"

    assert seen["auth"] == "DeepL-Auth-Key key-123"
    assert "target_lang=FR" in seen["body"]


@pytest.mark.asyncio
async def test_deepl_without_key_is_disabled() -> None:
    async with httpx.AsyncClient() as client:
        provider = DeepLProvider(client, None, "https://deepl.test/v2/translate")
        assert not provider.enabled


@pytest.mark.asyncio
async def test_gateway_falls_back_from_deepl_to_mymemory() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "deepl.test":
            return httpx.Response(456, json={"message": "Quota exceeded"})
        assert request.url.params["langpair"] == "en|ur"
        return httpx.Response(
            200, json={"responseData": {"translatedText": "سلام"}, "responseStatus": 200}
        )

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        gateway = TranslationGateway(
            [
                DeepLProvider(client, "key", "https://deepl.test/v2/translate"),
                MyMemoryProvider(client, "https://mymemory.test/get"),
            ],
            InMemoryTranslationCache(60, 10),
        )
        assert await gateway.translate("Hello", "en", "ur") == "سلام"


@pytest.mark.asyncio
async def test_mymemory_empty_translation_falls_back_to_original() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"responseData": {"translatedText": ""}})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        gateway = TranslationGateway(
            [MyMemoryProvider(client, "https://mymemory.test/get")],
            InMemoryTranslationCache(60, 10),
        )
        assert await gateway.translate("Hello", "en", "fr") == "Hello"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        {
            "responseData": {
                "translatedText": (
                    "MYMEMORY WARNING: YOU USED ALL AVAILABLE FREE TRANSLATIONS FOR TODAY."
                )
            },
            "responseStatus": 429,
        },
        {
            "responseData": {"translatedText": "'XX' IS AN INVALID TARGET LANGUAGE"},
            "responseStatus": "403",
        },
        {
            "responseData": {"translatedText": "MYMEMORY WARNING: QUOTA NEARLY EXHAUSTED"},
            "responseStatus": 200,
        },
    ],
)
async def test_mymemory_error_inside_ok_response_is_not_cached(body) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=body)

    cache = InMemoryTranslationCache(60, 10)
    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        gateway = TranslationGateway([MyMemoryProvider(client, "https://mymemory.test/get")], cache)
        assert await gateway.translate("Hello", "en", "fr") == "Hello"

    assert cache.get("Hello", "en", "fr") is None
    assert len(cache) == 0


@pytest.mark.asyncio
async def test_network_error_is_treated_as_provider_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("boom", request=request)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        gateway = TranslationGateway(
            [MyMemoryProvider(client, "https://mymemory.test/get")],
            InMemoryTranslationCache(60, 10),
        )
        assert await gateway.translate("Hello", "en", "fr") == "Hello"
