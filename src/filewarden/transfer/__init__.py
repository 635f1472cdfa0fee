"""Conflict-safe copy, move, and backup operations."""

from .engine import TransferEngine
from .errors import ExistsError, NotFoundError, TransferError, TransferIOError
from .metadata import MetadataOracle, fetch_metadata, stat_path
from .models import (
    ConflictMode,
    ConflictPolicy,
    PathMetadata,
    ResolvedAction,
    TransferMode,
    TransferOutcome,
)
from .naming import backup_path, format_index, index_candidates, indexed_path
from .primitives import ShutilPrimitive, TransferPrimitive
from .resolver import ConflictResolver

__all__ = [
    "ConflictMode",
    "ConflictPolicy",
    "ConflictResolver",
    "ExistsError",
    "MetadataOracle",
    "NotFoundError",
    "PathMetadata",
    "ResolvedAction",
    "ShutilPrimitive",
    "TransferEngine",
    "TransferError",
    "TransferIOError",
    "TransferMode",
    "TransferOutcome",
    "TransferPrimitive",
    "backup_path",
    "fetch_metadata",
    "format_index",
    "index_candidates",
    "indexed_path",
    "stat_path",
]
