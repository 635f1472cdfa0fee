"""Path-based type detection built on the byte classifier."""

from __future__ import annotations

import logging
import zipfile
from pathlib import Path
from typing import Dict, Tuple

from .classifier import TypeClassifier
from .models import ClassificationResult
from .signatures import PREFIX_LENGTH

LOGGER = logging.getLogger(__name__)

_ZIP_FAMILY = {"zip", "ooxml"}

_OOXML_PARTS: Tuple[Tuple[str, str, str], ...] = (
    ("word/", "docx", "document"),
    ("xl/", "xlsx", "spreadsheet"),
    ("ppt/", "pptx", "presentation"),
)

_PACKAGE_MIMETYPES: Dict[str, Tuple[str, str]] = {
    "application/vnd.oasis.opendocument.text": ("odt", "document"),
    "application/vnd.oasis.opendocument.spreadsheet": ("ods", "spreadsheet"),
    "application/vnd.oasis.opendocument.presentation": ("odp", "presentation"),
    "application/epub+zip": ("epub", "document"),
}


def read_prefix(path: Path, length: int = PREFIX_LENGTH) -> bytes:
    """Return the first ``length`` bytes of a file, NUL-padded when shorter.

    Args:
        path: File to read.
        length: Number of leading bytes to return.

    Returns:
        bytes: Exactly ``length`` bytes.

    Raises:
        OSError: If the file cannot be opened or read.
    """
    with path.open("rb") as fh:
        data = fh.read(length)
    if len(data) < length:
        LOGGER.debug("%s is %d bytes; padding prefix to %d.", path, len(data), length)
        data = data.ljust(length, b"\x00")
    return data


class TypeDetector:
    """Identify the type and category of files on disk.

    Byte-level classification decides the result. ZIP-based containers share
    their outer signature, so when enabled the archive members are inspected
    to tell OOXML, ODF and EPUB packages apart from plain archives.
    """

    def __init__(
        self,
        classifier: TypeClassifier | None = None,
        *,
        inspect_containers: bool = True,
    ) -> None:
        self.classifier = classifier or TypeClassifier()
        self.inspect_containers = inspect_containers

    def detect(self, path: Path) -> ClassificationResult:
        """Return the classification for the file at ``path``."""
        result = self.classifier.classify(read_prefix(path))
        if self.inspect_containers and result.type_id in _ZIP_FAMILY:
            refined = self._inspect_zip(path)
            if refined is not None:
                return refined
        return result

    def _inspect_zip(self, path: Path) -> ClassificationResult | None:
        try:
            with zipfile.ZipFile(path, "r") as archive:
                names = archive.namelist()
                for prefix, type_id, category in _OOXML_PARTS:
                    if any(name.startswith(prefix) for name in names):
                        return ClassificationResult(type_id=type_id, category=category)
                if "mimetype" in names:
                    with archive.open("mimetype") as fh:
                        mimetype = fh.read(200).decode("utf-8", errors="ignore").strip()
                    known = _PACKAGE_MIMETYPES.get(mimetype)
                    if known is not None:
                        return ClassificationResult(type_id=known[0], category=known[1])
        except (zipfile.BadZipFile, OSError, KeyError) as exc:
            LOGGER.debug("Container inspection failed for %s: %s", path, exc)
        return None


__all__ = ["TypeDetector", "read_prefix"]
