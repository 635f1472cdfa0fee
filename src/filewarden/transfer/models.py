"""Data models describing conflict policies and transfer outcomes."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ConflictMode(str, Enum):
    """Strategy applied when a destination path is already occupied."""

    OVERWRITE = "overwrite"
    BACKUP_SUFFIX = "backup_suffix"
    INDEX_RENAME = "index_rename"
    FAIL_IF_EXISTS = "fail_if_exists"


class TransferMode(str, Enum):
    """Kind of transfer to perform."""

    COPY = "copy"
    MOVE = "move"


class ConflictPolicy(BaseModel):
    """Rules governing what happens when a destination is occupied.

    Attributes:
        mode: Active conflict strategy.
        separator: Text placed between the stem and the index for index renames.
        suffix: Text appended to the occupant's path for backup renames.
        limit: Highest index tried before an index rename gives up.
        error_on_no_source: Raise when the source is missing instead of skipping.
        error_on_exist: Raise when a conflict cannot be resolved instead of skipping.
    """

    model_config = ConfigDict(frozen=True)

    mode: ConflictMode = ConflictMode.INDEX_RENAME
    separator: str = "-"
    suffix: str = Field(default="~", min_length=1)
    limit: int = Field(default=32, ge=1)
    error_on_no_source: bool = False
    error_on_exist: bool = True


class PathMetadata(BaseModel):
    """Snapshot of a path's filesystem state.

    The snapshot is taken once per decision point and never refreshed; callers
    that need fresher state must fetch a new one.

    Attributes:
        path: Path the snapshot describes.
        exists: Whether anything occupies the path.
        is_file: Whether the path is a regular file.
        is_directory: Whether the path is a directory.
        size: Size in bytes when the path exists.
        created_at: Creation time, falling back to modification time.
        modified_at: Last modification time.
    """

    model_config = ConfigDict(frozen=True)

    path: Path
    exists: bool = False
    is_file: bool = False
    is_directory: bool = False
    size: Optional[int] = None
    created_at: Optional[datetime] = None
    modified_at: Optional[datetime] = None

    @classmethod
    def missing(cls, path: Path) -> "PathMetadata":
        return cls(path=path)


class ResolvedAction(BaseModel):
    """Decision produced by the conflict resolver.

    Attributes:
        proceed: Whether the caller should go ahead with the transfer.
        destination: Path the transfer should write to.
        skipped: Whether the request was skipped because of an unresolved conflict.
        conflict: Whether the requested destination was occupied.
        backup_path: Where a previous occupant was moved, if anywhere.
    """

    model_config = ConfigDict(frozen=True)

    proceed: bool
    destination: Path
    skipped: bool = False
    conflict: bool = False
    backup_path: Optional[Path] = None


class TransferOutcome(BaseModel):
    """Result of a single copy or move request.

    Attributes:
        source: Source path of the request.
        requested: Destination path the caller asked for.
        destination: Destination path after conflict resolution.
        mode: Copy or move.
        transferred: Whether bytes were (or, in a dry run, would be) transferred.
        skipped: Whether the request was skipped.
        dry_run: Whether the request ran without touching the filesystem.
        backup_path: Where a previous occupant was moved, if anywhere.
    """

    source: Path
    requested: Path
    destination: Optional[Path] = None
    mode: TransferMode
    transferred: bool = False
    skipped: bool = False
    dry_run: bool = False
    backup_path: Optional[Path] = None


__all__ = [
    "ConflictMode",
    "TransferMode",
    "ConflictPolicy",
    "PathMetadata",
    "ResolvedAction",
    "TransferOutcome",
]
