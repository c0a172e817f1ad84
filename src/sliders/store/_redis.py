"""Redis-backed key-value store."""

from typing import TYPE_CHECKING, cast, final

import redis

from sliders.exceptions import StoreError

if TYPE_CHECKING:
    from collections.abc import Callable


@final
class RedisStore:
    """KeyValueStore implementation over a ``redis.Redis`` client.

    Every ``redis.RedisError`` is converted into a ``StoreError`` so callers
    never depend on the client library's exception types.
    """

    __slots__ = ("_client",)

    def __init__(self, client: redis.Redis) -> None:
        """Initialize with an existing client.

        Args:
            client: A Redis client created with ``decode_responses=True``.
        """
        self._client = client

    @classmethod
    def from_url(cls, url: str) -> "RedisStore":
        """Create a store connected to ``url``.

        Args:
            url: Redis connection URL, e.g. ``redis://localhost:6379/0``.

        Returns:
            A RedisStore backed by a pooled client.
        """
        pool = redis.ConnectionPool.from_url(url, decode_responses=True)
        return cls(redis.Redis(connection_pool=pool))

    @property
    def client(self) -> redis.Redis:
        """Return the underlying Redis client."""
        return self._client

    def _call[T](self, key: str, operation: str, func: "Callable[[], T]") -> T:
        try:
            return func()
        except (redis.RedisError, UnicodeDecodeError) as e:
            msg = f"Redis {operation} failed for '{key}': {e}"
            raise StoreError(msg, key=key, cause=e) from e

    def hgetall(self, key: str) -> dict[str, str]:
        """Return every field of the hash at ``key``."""
        raw = self._call(key, "HGETALL", lambda: self._client.hgetall(key))
        return {str(k): str(v) for k, v in cast("dict[str, str]", raw).items()}

    def hset(self, key: str, field: str, value: str) -> None:
        """Set one field of the hash at ``key``."""
        _ = self._call(key, "HSET", lambda: self._client.hset(key, field, value))

    def hdel(self, key: str, field: str) -> None:
        """Delete one field of the hash at ``key``."""
        _ = self._call(key, "HDEL", lambda: self._client.hdel(key, field))
