"""Byte-level file type detection."""

from .classifier import TypeClassifier, category, classify
from .detectors import TypeDetector, read_prefix
from .errors import DetectionError, LengthError
from .models import ClassificationResult, FileCategory, SignatureEntry
from .signatures import PREFIX_LENGTH, SIGNATURE_TABLE

__all__ = [
    "ClassificationResult",
    "DetectionError",
    "FileCategory",
    "LengthError",
    "PREFIX_LENGTH",
    "SIGNATURE_TABLE",
    "SignatureEntry",
    "TypeClassifier",
    "TypeDetector",
    "category",
    "classify",
    "read_prefix",
]
