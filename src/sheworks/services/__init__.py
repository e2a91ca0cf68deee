"""Business logic services for the SheWorks marketplace."""

from .presence import InMemoryPresenceRegistry, RedisPresenceRegistry
from .rate_limit import InMemoryRateLimitStore, RateLimiter, RedisRateLimitStore
from .translation import (
    InMemoryTranslationCache,
    RedisTranslationCache,
    TranslationGateway,
    build_translation_gateway,
)

__all__ = [
    "InMemoryPresenceRegistry",
    "RedisPresenceRegistry",
    "InMemoryRateLimitStore",
    "RateLimiter",
    "RedisRateLimitStore",
    "InMemoryTranslationCache",
    "RedisTranslationCache",
    "TranslationGateway",
    "build_translation_gateway",
]
