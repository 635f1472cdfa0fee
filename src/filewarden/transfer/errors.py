"""Transfer and conflict-resolution errors."""

from __future__ import annotations

from pathlib import Path

from filewarden.errors import FileWardenError


class TransferError(FileWardenError):
    """Base exception for copy, move, and backup operations."""


class NotFoundError(TransferError):
    """Raised when a transfer source does not exist and the policy requires it."""

    def __init__(self, path: Path, message: str = "Source does not exist") -> None:
        super().__init__(f"{message}: {path}")
        self.path = path


class ExistsError(TransferError):
    """Raised when a destination conflict cannot be resolved under the active policy."""

    def __init__(self, path: Path, message: str = "Destination already exists") -> None:
        super().__init__(f"{message}: {path}")
        self.path = path


class TransferIOError(TransferError, OSError):
    """Raised when the underlying copy, move, rename, or stat call fails.

    It is also an :class:`OSError`, so callers catching OS-level failures see
    it; ``errno`` mirrors the wrapped error.
    """

    def __init__(
        self,
        source: Path,
        destination: Path,
        cause: OSError,
        message: str | None = None,
    ) -> None:
        super().__init__(message or f"Could not transfer {source} to {destination}: {cause}")
        self.errno = cause.errno
        self.source = source
        self.destination = destination
        self.cause = cause
