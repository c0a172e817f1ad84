"""Shared key-value store access.

Key Components:
    - KeyValueStore: Protocol for hash-oriented stores
    - RedisStore: Redis implementation
    - MemoryStore: In-memory implementation for tests and dry runs
    - DesiredStateSource: Reads this host's desired queue counts
    - CapacityRegistry: Advertises this host's capacity
"""

from ._desired import DesiredStateSource, parse_count
from ._keys import DEFAULT_NAMESPACE, desired_state_key, hosts_key
from ._memory import MemoryStore
from ._protocol import KeyValueStore
from ._redis import RedisStore
from ._registry import CapacityRegistry

__all__ = [
    "DEFAULT_NAMESPACE",
    "CapacityRegistry",
    "DesiredStateSource",
    "KeyValueStore",
    "MemoryStore",
    "RedisStore",
    "desired_state_key",
    "hosts_key",
    "parse_count",
]
