"""Host identification."""

import socket


def short_hostname() -> str:
    """Return the lowercased short host name, like ``hostname -s``."""
    return socket.gethostname().split(".", 1)[0].lower()
