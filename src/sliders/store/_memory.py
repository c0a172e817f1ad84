"""In-memory key-value store.

Useful for testing and dry runs. Data is not persisted or shared.
"""

from typing import final


@final
class MemoryStore:
    """Drop-in replacement for RedisStore backed by a dict of dicts."""

    __slots__ = ("_hashes",)

    def __init__(self, initial: dict[str, dict[str, str]] | None = None) -> None:
        """Initialize the store, optionally seeded with hashes."""
        self._hashes: dict[str, dict[str, str]] = {
            key: dict(fields) for key, fields in (initial or {}).items()
        }

    def hgetall(self, key: str) -> dict[str, str]:
        """Return a copy of the hash at ``key``."""
        return dict(self._hashes.get(key, {}))

    def hset(self, key: str, field: str, value: str) -> None:
        """Set one field of the hash at ``key``."""
        self._hashes.setdefault(key, {})[field] = str(value)

    def hdel(self, key: str, field: str) -> None:
        """Delete one field; drops the hash once it is empty."""
        fields = self._hashes.get(key)
        if fields is None:
            return
        _ = fields.pop(field, None)
        if not fields:
            del self._hashes[key]

    def keys(self) -> list[str]:
        """Return all hash keys currently present."""
        return list(self._hashes)
