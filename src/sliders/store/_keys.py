"""Key layout in the shared store.

Two hashes per deployment namespace:

- ``plugins:<namespace>:<hostname>``: queue name to desired worker count
- ``plugins:<namespace>:hosts``: hostname to the host's max_children
"""

DEFAULT_NAMESPACE = "resque-sliders"

_PREFIX = "plugins"


def desired_state_key(hostname: str, namespace: str = DEFAULT_NAMESPACE) -> str:
    """Return the hash key holding desired queue counts for a host."""
    return f"{_PREFIX}:{namespace}:{hostname}"


def hosts_key(namespace: str = DEFAULT_NAMESPACE) -> str:
    """Return the hash key where hosts advertise their capacity."""
    return f"{_PREFIX}:{namespace}:hosts"
