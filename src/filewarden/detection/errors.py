"""Detection errors."""

from filewarden.errors import FileWardenError


class DetectionError(FileWardenError):
    """Base exception for byte-level type detection."""


class LengthError(DetectionError, ValueError):
    """Raised when a prefix is shorter than the classification window."""

    def __init__(self, actual: int, required: int) -> None:
        super().__init__(f"Prefix must contain at least {required} bytes; got {actual}.")
        self.actual = actual
        self.required = required
