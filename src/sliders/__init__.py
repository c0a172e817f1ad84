"""Keep per-queue worker processes in sync with counts declared in Redis."""

__version__ = "0.1.0"
