"""Classify file contents from their leading bytes."""

from __future__ import annotations

import codecs
import json
import logging
from typing import Callable, Dict, Tuple

from .errors import LengthError
from .models import ClassificationResult, SignatureEntry
from .signatures import JP2_SIGNATURE_BOX, PREFIX_LENGTH, SIGNATURE_TABLE

LOGGER = logging.getLogger(__name__)

_EXIF_MARKER = b"\xff\xe1"

_RIFF_SUBTYPES: Dict[bytes, Tuple[str, str]] = {
    b"WAVE": ("wav", "audio"),
    b"AVI ": ("avi", "video"),
}

_BMFF_BRANDS: Dict[bytes, Tuple[str, str]] = {
    b"jp2 ": ("jp2", "image"),
    b"jpx ": ("jpf", "image"),
    b"qt  ": ("mov", "video"),
    b"M4A ": ("m4a", "audio"),
    b"M4B ": ("m4a", "audio"),
    b"M4P ": ("m4a", "audio"),
    b"avif": ("avif", "image"),
    b"avis": ("avif", "image"),
}
_BMFF_BRANDS.update(
    {
        brand: ("heif", "image")
        for brand in (b"heic", b"heix", b"hevc", b"hevx", b"heim", b"heis", b"mif1", b"msf1")
    }
)
_BMFF_BRANDS.update(
    {
        brand: ("mp4", "video")
        for brand in (
            b"isom",
            b"iso2",
            b"iso3",
            b"iso4",
            b"iso5",
            b"iso6",
            b"mp41",
            b"mp42",
            b"avc1",
            b"dash",
            b"mmp4",
            b"MSNV",
            b"M4V ",
            b"M4VH",
            b"M4VP",
            b"f4v ",
            b"3gp4",
            b"3gp5",
            b"3gp6",
            b"3g2a",
        )
    }
)


class TypeClassifier:
    """Identify a file's type and category from a fixed-size byte prefix.

    The classifier is a pure function of its input and the signature table:
    it performs no I/O and never raises for content it does not recognise.

    ISO base media files are labelled by their ``ftyp`` brand. Recognised
    brands win, so ``isom`` or ``mp42`` is mp4 wherever the box sits; only an
    unrecognised brand with ``ftyp`` at offsets 4 to 7, or after a JPEG 2000
    signature box, falls back to j2k.
    """

    def __init__(self, *, sniff_text: bool = True) -> None:
        self.sniff_text = sniff_text
        self._families: Dict[str, Callable[[bytes, SignatureEntry], ClassificationResult]] = {
            "isobmff": self._resolve_isobmff,
            "riff": self._resolve_riff,
            "jpeg": self._resolve_jpeg,
        }

    def classify(self, prefix: bytes) -> ClassificationResult:
        """Return the type and category carried by the prefix.

        Args:
            prefix: Leading bytes of a file; at least ``PREFIX_LENGTH`` long.

        Returns:
            ClassificationResult: Detected type, or an unknown result.

        Raises:
            LengthError: If the prefix is shorter than ``PREFIX_LENGTH``.
        """
        if len(prefix) < PREFIX_LENGTH:
            raise LengthError(len(prefix), PREFIX_LENGTH)
        window = bytes(prefix[:PREFIX_LENGTH])

        for entry in SIGNATURE_TABLE:
            if not entry.matches(window):
                continue
            if entry.family is None:
                return ClassificationResult(type_id=entry.type_id, category=entry.category)
            return self._families[entry.family](window, entry)

        if self.sniff_text and _looks_like_json(window):
            return ClassificationResult(type_id="json", category="data")
        return ClassificationResult.unknown()

    def category(self, prefix: bytes) -> str | None:
        """Return only the category for the prefix."""
        return self.classify(prefix).category

    # ------------------------------------------------------------------ #
    # Family disambiguation                                              #
    # ------------------------------------------------------------------ #

    def _resolve_isobmff(self, prefix: bytes, entry: SignatureEntry) -> ClassificationResult:
        index = prefix.find(b"ftyp")
        if index < 0 or index + 8 > len(prefix):
            LOGGER.debug("ISO-BMFF prefix without a complete ftyp box; type unknown.")
            return ClassificationResult.unknown()

        brand = prefix[index + 4 : index + 8]
        known = _BMFF_BRANDS.get(brand)
        if known is not None:
            return ClassificationResult(type_id=known[0], category=known[1])
        if 4 <= index < 8 or prefix.startswith(JP2_SIGNATURE_BOX):
            return ClassificationResult(type_id="j2k", category="image")
        return ClassificationResult(type_id="mp4", category="video")

    def _resolve_riff(self, prefix: bytes, entry: SignatureEntry) -> ClassificationResult:
        subtype = _RIFF_SUBTYPES.get(prefix[8:12])
        if subtype is None:
            return ClassificationResult.unknown()
        return ClassificationResult(type_id=subtype[0], category=subtype[1])

    def _resolve_jpeg(self, prefix: bytes, entry: SignatureEntry) -> ClassificationResult:
        type_id = "jpg" if prefix[2:4] == _EXIF_MARKER else "jpeg"
        return ClassificationResult(type_id=type_id, category=entry.category)


def _looks_like_json(prefix: bytes) -> bool:
    """Return True when the prefix is a complete or truncated JSON document."""
    data = prefix.rstrip(b"\x00")
    if data.startswith(codecs.BOM_UTF8):
        data = data[len(codecs.BOM_UTF8) :]
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as exc:
        if exc.reason != "unexpected end of data":
            return False
        text = data[: exc.start].decode("utf-8")

    text = text.strip()
    if not text or "\x00" in text:
        return False
    try:
        json.loads(text)
    except json.JSONDecodeError as exc:
        # A prefix cut mid-document fails at its very end.
        if text[0] not in "{[":
            return False
        return exc.pos >= len(text) or exc.msg.startswith("Unterminated string")
    return True


_DEFAULT_CLASSIFIER = TypeClassifier()


def classify(prefix: bytes) -> ClassificationResult:
    """Classify a prefix with the default classifier."""
    return _DEFAULT_CLASSIFIER.classify(prefix)


def category(prefix: bytes) -> str | None:
    """Return the category of a prefix with the default classifier."""
    return _DEFAULT_CLASSIFIER.category(prefix)


__all__ = ["TypeClassifier", "classify", "category"]
