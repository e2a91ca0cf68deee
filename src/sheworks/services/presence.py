"""Presence tracking for realtime connections.

Maps authenticated participants to the id of their live connection, with one
table per participant kind so customers and vendors are routed independently.
"""

from __future__ import annotations

from typing import Any, Protocol

PRESENCE_KINDS = ("customer", "vendor")


class PresenceRegistry(Protocol):
    """Participant -> connection lookup shared by the realtime layer."""

    def register(self, participant_id: str, kind: str, connection_id: str) -> None: ...

    def lookup(self, participant_id: str, kind: str) -> str | None: ...

    def unregister(self, connection_id: str) -> tuple[str, str] | None: ...


class InMemoryPresenceRegistry:
    """Presence held in process memory; lost on restart."""

    def __init__(self) -> None:
        self._tables: dict[str, dict[str, str]] = {kind: {} for kind in PRESENCE_KINDS}
        self._by_connection: dict[str, tuple[str, str]] = {}

    def _table(self, kind: str) -> dict[str, str]:
        try:
            return self._tables[kind]
        except KeyError as exc:
            raise ValueError(f"Unknown presence kind: {kind}") from exc

    def register(self, participant_id: str, kind: str, connection_id: str) -> None:
        # A newer connection replaces the older one; the old socket is left as is.
        self._table(kind)[participant_id] = connection_id
        self._by_connection[connection_id] = (participant_id, kind)

    def lookup(self, participant_id: str, kind: str) -> str | None:
        return self._table(kind).get(participant_id)

    def unregister(self, connection_id: str) -> tuple[str, str] | None:
        identity = self._by_connection.pop(connection_id, None)
        if identity is None:
            return None
        participant_id, kind = identity
        table = self._table(kind)
        if table.get(participant_id) == connection_id:
            del table[participant_id]
        return identity


class RedisPresenceRegistry:
    """Presence stored in Redis hashes so several workers see the same table."""

    def __init__(self, client: Any, prefix: str = "presence") -> None:
        self._redis = client
        self._prefix = prefix

    def _table_key(self, kind: str) -> str:
        if kind not in PRESENCE_KINDS:
            raise ValueError(f"Unknown presence kind: {kind}")
        return f"{self._prefix}:{kind}"

    @property
    def _connections_key(self) -> str:
        return f"{self._prefix}:connections"

    @staticmethod
    def _text(value: Any) -> str | None:
        if value is None:
            return None
        return value.decode() if isinstance(value, bytes) else str(value)

    def register(self, participant_id: str, kind: str, connection_id: str) -> None:
        pipe = self._redis.pipeline()
        pipe.hset(self._table_key(kind), participant_id, connection_id)
        pipe.hset(self._connections_key, connection_id, f"{kind}:{participant_id}")
        pipe.execute()

    def lookup(self, participant_id: str, kind: str) -> str | None:
        return self._text(self._redis.hget(self._table_key(kind), participant_id))

    def unregister(self, connection_id: str) -> tuple[str, str] | None:
        raw = self._text(self._redis.hget(self._connections_key, connection_id))
        if raw is None:
            return None
        self._redis.hdel(self._connections_key, connection_id)
        kind, _, participant_id = raw.partition(":")
        table_key = self._table_key(kind)
        if self._text(self._redis.hget(table_key, participant_id)) == connection_id:
            self._redis.hdel(table_key, participant_id)
        return participant_id, kind
