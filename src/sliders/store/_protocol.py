"""Protocol for the shared key-value store.

Only the hash operations the supervisor needs are part of the interface,
so the Redis client and the in-memory store are interchangeable.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class KeyValueStore(Protocol):
    """Minimal hash-oriented key-value store.

    Implementations raise ``StoreError`` for any access failure.
    """

    def hgetall(self, key: str) -> dict[str, str]:
        """Return every field of the hash at ``key``.

        Args:
            key: The hash key.

        Returns:
            Mapping of field to value. Empty if the key does not exist.

        Raises:
            StoreError: If the store cannot be read.
        """
        ...

    def hset(self, key: str, field: str, value: str) -> None:
        """Set one field of the hash at ``key``.

        Raises:
            StoreError: If the store cannot be written.
        """
        ...

    def hdel(self, key: str, field: str) -> None:
        """Delete one field of the hash at ``key``.

        Deleting a missing field is not an error.

        Raises:
            StoreError: If the store cannot be written.
        """
        ...
