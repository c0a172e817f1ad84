"""Advertises this host's capacity in the shared store."""

from typing import TYPE_CHECKING, final

from ._desired import parse_count
from ._keys import DEFAULT_NAMESPACE, hosts_key

if TYPE_CHECKING:
    from ._protocol import KeyValueStore


@final
class CapacityRegistry:
    """Write view over the hosts hash.

    The supervisor registers ``hostname -> max_children`` on startup and
    removes its own entry on shutdown.
    """

    __slots__ = ("_hostname", "_key", "_max_children", "_store")

    def __init__(
        self,
        store: "KeyValueStore",
        hostname: str,
        max_children: int,
        *,
        namespace: str = DEFAULT_NAMESPACE,
    ) -> None:
        """Initialize the registry.

        Args:
            store: The shared key-value store.
            hostname: This host's name.
            max_children: Capacity to advertise.
            namespace: Deployment namespace for the store keys.
        """
        self._store = store
        self._hostname = hostname
        self._max_children = max_children
        self._key = hosts_key(namespace)

    @property
    def hostname(self) -> str:
        """Return the advertised host name."""
        return self._hostname

    @property
    def key(self) -> str:
        """Return the hosts hash key."""
        return self._key

    def register(self) -> None:
        """Advertise this host's capacity.

        Raises:
            StoreError: If the store cannot be written.
        """
        self._store.hset(self._key, self._hostname, str(self._max_children))

    def deregister(self) -> None:
        """Remove this host's entry.

        Raises:
            StoreError: If the store cannot be written.
        """
        self._store.hdel(self._key, self._hostname)

    def hosts(self) -> dict[str, int]:
        """Return every registered host and its capacity.

        Entries with unparseable capacities are skipped.

        Raises:
            StoreError: If the store cannot be read.
        """
        hosts: dict[str, int] = {}
        for host, raw in self._store.hgetall(self._key).items():
            capacity = parse_count(raw)
            if capacity is not None:
                hosts[host] = capacity
        return hosts
