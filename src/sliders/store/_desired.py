"""Read-only view of the desired worker counts for this host."""

from typing import TYPE_CHECKING, final

from ._keys import DEFAULT_NAMESPACE, desired_state_key

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

    from ._protocol import KeyValueStore


def parse_count(raw: str) -> int | None:
    """Parse a stored desired count.

    Args:
        raw: The value as stored, e.g. ``"3"``.

    Returns:
        The count, or None if the value is not a non-negative integer.
    """
    try:
        count = int(raw.strip())
    except ValueError:
        return None
    return count if count >= 0 else None


@final
class DesiredStateSource:
    """Reads the queue-to-count mapping declared for one host.

    Every call to ``read`` goes to the store; nothing is cached, since other
    hosts and operators may change the declaration at any time.
    """

    __slots__ = ("_key", "_logger", "_store")

    def __init__(
        self,
        store: "KeyValueStore",
        hostname: str,
        *,
        namespace: str = DEFAULT_NAMESPACE,
        logger: "FilteringBoundLogger | None" = None,
    ) -> None:
        """Initialize the source.

        Args:
            store: The shared key-value store.
            hostname: Host whose declaration is read.
            namespace: Deployment namespace for the store keys.
            logger: Optional logger for malformed-count warnings.
        """
        self._store = store
        self._key = desired_state_key(hostname, namespace)
        self._logger = logger

    @property
    def key(self) -> str:
        """Return the store key this source reads."""
        return self._key

    def read(self) -> dict[str, int]:
        """Return the desired count per queue.

        Counts that are not non-negative integers are treated as zero.

        Returns:
            Mapping of queue name to desired worker count, in store order.

        Raises:
            StoreError: If the store cannot be read.
        """
        desired: dict[str, int] = {}
        for queue, raw in self._store.hgetall(self._key).items():
            count = parse_count(raw)
            if count is None:
                if self._logger is not None:
                    self._logger.warning(
                        "invalid_desired_count", queue=queue, value=raw, key=self._key
                    )
                count = 0
            desired[queue] = count
        return desired

    def set_count(self, queue: str, count: int) -> None:
        """Declare the desired count for a queue.

        A count of zero removes the queue from the declaration.

        Args:
            queue: Queue name.
            count: Desired number of workers.

        Raises:
            ValueError: If count is negative.
            StoreError: If the store cannot be written.
        """
        if count < 0:
            msg = f"Desired count must be non-negative, got {count}"
            raise ValueError(msg)
        if count == 0:
            self._store.hdel(self._key, queue)
        else:
            self._store.hset(self._key, queue, str(count))
