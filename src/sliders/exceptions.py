"""Sliders exceptions."""

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pathlib import Path


class SlidersError(Exception):
    """Base exception for sliders errors."""


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigError(SlidersError):
    """Base exception for configuration errors."""


class ConfigLoadError(ConfigError):
    """Raised when configuration cannot be loaded or parsed."""

    def __init__(
        self,
        message: str,
        *,
        path: "Path | None" = None,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        """Initialize with error message and source location.

        Args:
            message: Human-readable error message.
            path: Path to the config file that failed to load.
            line: Line number of the parse error, if known.
            column: Column number of the parse error, if known.
        """
        super().__init__(message)
        self.path: Path | None = path
        self.line: int | None = line
        self.column: int | None = column


class ConfigValidationError(ConfigError):
    """Raised when configuration values fail validation.

    Attributes:
        errors: Field-level validation errors as reported by pydantic.
    """

    def __init__(
        self,
        message: str,
        *,
        errors: list[dict[str, Any]] | None = None,  # pyright: ignore[reportExplicitAny]
    ) -> None:
        """Initialize with error message and field errors."""
        super().__init__(message)
        self.errors: list[dict[str, Any]] = errors or []  # pyright: ignore[reportExplicitAny]


# =============================================================================
# Store Exceptions
# =============================================================================


class StoreError(SlidersError):
    """Raised when the shared key-value store cannot be read or written.

    Attributes:
        key: The store key involved in the failed operation.
        cause: The underlying exception that caused the failure.
    """

    def __init__(
        self,
        message: str,
        *,
        key: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        """Initialize with error message and store context.

        Args:
            message: Human-readable error message.
            key: The store key involved in the failed operation.
            cause: The underlying exception that caused the failure.
        """
        super().__init__(message)
        self.key: str | None = key
        self.cause: Exception | None = cause


# =============================================================================
# Supervisor Exceptions
# =============================================================================


class SupervisorError(SlidersError):
    """Base exception for supervisor errors."""


class WorkerSpawnError(SupervisorError):
    """Raised when a worker process fails to start.

    Attributes:
        queue: The queue the worker was meant to serve.
        cause: The underlying exception that caused the failure.
    """

    def __init__(
        self,
        message: str,
        *,
        queue: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        """Initialize with error message and worker context.

        Args:
            message: Human-readable error message.
            queue: The queue the worker was meant to serve.
            cause: The underlying exception that caused the failure.
        """
        super().__init__(message)
        self.queue: str | None = queue
        self.cause: Exception | None = cause


class PidFileError(SlidersError):
    """Raised when the pid file cannot be written.

    Attributes:
        path: The pid file path.
        cause: The underlying exception that caused the failure.
    """

    def __init__(
        self,
        message: str,
        *,
        path: "Path | None" = None,
        cause: Exception | None = None,
    ) -> None:
        """Initialize with error message and pid file context."""
        super().__init__(message)
        self.path: Path | None = path
        self.cause: Exception | None = cause
