"""Data models for byte-level type detection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict

FileCategory = Literal[
    "image",
    "video",
    "audio",
    "document",
    "spreadsheet",
    "presentation",
    "database",
    "archive",
    "executable",
    "font",
    "script",
    "data",
]


@dataclass(frozen=True, slots=True)
class SignatureEntry:
    """A registered file signature.

    Attributes:
        type_id: Short type label, usually the conventional extension.
        category: Broad category the type belongs to.
        patterns: Alternative byte sequences, any of which identifies the type.
        offset: First position in the prefix where ``patterns`` are matched.
        slack: Number of further positions after ``offset`` where a pattern
            may also start.
        requires: Extra ``(offset, bytes)`` windows that must also match.
        family: Disambiguator tag for signatures shared by several types.
    """

    type_id: str
    category: FileCategory
    patterns: Tuple[bytes, ...]
    offset: int = 0
    slack: int = 0
    requires: Tuple[Tuple[int, bytes], ...] = ()
    family: Optional[str] = None

    @property
    def span(self) -> int:
        """Return the number of leading bytes this entry needs to inspect."""
        ends = [self.offset + self.slack + len(pattern) for pattern in self.patterns]
        ends.extend(offset + len(window) for offset, window in self.requires)
        return max(ends)

    def matches(self, prefix: bytes) -> bool:
        """Return True when the prefix carries this entry's signature."""
        for offset, window in self.requires:
            if prefix[offset : offset + len(window)] != window:
                return False
        return any(
            prefix[start : start + len(pattern)] == pattern
            for start in range(self.offset, self.offset + self.slack + 1)
            for pattern in self.patterns
        )


class ClassificationResult(BaseModel):
    """Outcome of classifying a byte prefix.

    Attributes:
        type_id: Detected type label, or None when unknown.
        category: Detected category, or None when unknown.
    """

    model_config = ConfigDict(frozen=True)

    type_id: Optional[str] = None
    category: Optional[str] = None

    @classmethod
    def unknown(cls) -> "ClassificationResult":
        return cls()

    @property
    def is_unknown(self) -> bool:
        return self.type_id is None and self.category is None


__all__ = ["FileCategory", "SignatureEntry", "ClassificationResult"]
