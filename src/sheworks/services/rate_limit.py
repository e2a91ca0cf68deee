"""Fixed-window request throttling keyed by caller identity."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol


class RateLimitExceeded(Exception):
    """Raised when a caller has used up its quota for the current window."""

    def __init__(self, identity: str, retry_after: float) -> None:
        super().__init__(f"Rate limit exceeded for {identity}; retry after {retry_after:.0f}s")
        self.identity = identity
        self.retry_after = retry_after


@dataclass(frozen=True)
class RateLimitDecision:
    """Outcome of charging one request against a caller's quota."""

    allowed: bool
    count: int
    remaining: int
    retry_after: float


class RateLimitStore(Protocol):
    """Backing store for per-identity window counters."""

    def increment(self, identity: str, window_seconds: float, now: float) -> tuple[int, float]:
        """Count one request and return ``(count, window_start)`` for the current window."""
        ...


class InMemoryRateLimitStore:
    """Window counters kept in process memory.

    Counters are held in the order their windows opened, so every increment
    first drops the elapsed windows at the front of the table and idle
    identities do not accumulate.
    """

    def __init__(self) -> None:
        self._windows: dict[str, list[float]] = {}

    def __len__(self) -> int:
        return len(self._windows)

    def _drop_elapsed_head(self, window_seconds: float, now: float) -> None:
        while self._windows:
            identity, (_, start) = next(iter(self._windows.items()))
            if now - start < window_seconds:
                break
            del self._windows[identity]

    def increment(self, identity: str, window_seconds: float, now: float) -> tuple[int, float]:
        self._drop_elapsed_head(window_seconds, now)
        window = self._windows.get(identity)
        if window is None or now - window[1] >= window_seconds:
            # Reinsert so the table stays ordered by window start.
            self._windows.pop(identity, None)
            window = [0, now]
            self._windows[identity] = window
        window[0] += 1
        return int(window[0]), window[1]


class RedisRateLimitStore:
    """Window counters shared between processes through Redis.

    The window start is stored next to the counter; both keys expire with the
    window so idle identities cost nothing.
    """

    def __init__(self, client: Any, prefix: str = "ratelimit") -> None:
        self._redis = client
        self._prefix = prefix

    def increment(self, identity: str, window_seconds: float, now: float) -> tuple[int, float]:
        count_key = f"{self._prefix}:{identity}:count"
        start_key = f"{self._prefix}:{identity}:start"
        ttl = max(1, int(window_seconds + 0.999))

        created = self._redis.set(start_key, repr(now), nx=True, ex=ttl)
        pipe = self._redis.pipeline()
        if created:
            pipe.set(count_key, 0, ex=ttl)
        pipe.incr(count_key)
        pipe.get(start_key)
        results = pipe.execute()
        count = int(results[-2])
        raw_start = results[-1]
        if isinstance(raw_start, bytes):
            raw_start = raw_start.decode()
        start = float(raw_start) if raw_start is not None else now
        return count, start


class RateLimiter:
    """Allow at most ``limit`` requests per ``window_seconds`` for each identity.

    The first request of a window opens it with a count of one. Once the count
    would exceed ``limit`` the request is refused with the time remaining
    until the window closes. Every call is charged, including ones whose
    result is later served from a cache.
    """

    def __init__(
        self,
        store: RateLimitStore,
        limit: int,
        window_seconds: float,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.store = store
        self.limit = max(1, int(limit))
        self.window_seconds = float(window_seconds)
        self._clock = clock

    def hit(self, identity: str) -> RateLimitDecision:
        """Charge one request to ``identity`` and report whether it may proceed."""
        now = self._clock()
        count, window_start = self.store.increment(identity, self.window_seconds, now)
        if count <= self.limit:
            return RateLimitDecision(
                allowed=True,
                count=count,
                remaining=self.limit - count,
                retry_after=0.0,
            )
        retry_after = max(0.0, window_start + self.window_seconds - now)
        return RateLimitDecision(allowed=False, count=count, remaining=0, retry_after=retry_after)

    def check(self, identity: str) -> RateLimitDecision:
        """Like :meth:`hit` but raise :class:`RateLimitExceeded` when refused."""
        decision = self.hit(identity)
        if not decision.allowed:
            raise RateLimitExceeded(identity, decision.retry_after)
        return decision
