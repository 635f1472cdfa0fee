"""Filesystem metadata oracle."""

from __future__ import annotations

import logging
import os
import stat
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable

from .errors import TransferIOError
from .models import PathMetadata

LOGGER = logging.getLogger(__name__)

MetadataOracle = Callable[[Path], PathMetadata]


def stat_path(path: Path) -> PathMetadata:
    """Return a metadata snapshot for ``path``.

    Symbolic links are followed. A dangling link still occupies its slot, so
    it is reported as existing even though it is neither a file nor a
    directory.

    Args:
        path: Path to inspect.

    Returns:
        PathMetadata: Snapshot describing the path.

    Raises:
        OSError: If the path exists but cannot be inspected.
    """
    try:
        result = path.stat()
    except (FileNotFoundError, NotADirectoryError):
        if os.path.lexists(path):
            LOGGER.debug("Dangling symlink occupies %s", path)
            return PathMetadata(path=path, exists=True)
        return PathMetadata.missing(path)

    modified = datetime.fromtimestamp(result.st_mtime, tz=timezone.utc)
    birth = getattr(result, "st_birthtime", None)
    created = datetime.fromtimestamp(birth, tz=timezone.utc) if birth else modified
    return PathMetadata(
        path=path,
        exists=True,
        is_file=stat.S_ISREG(result.st_mode),
        is_directory=stat.S_ISDIR(result.st_mode),
        size=result.st_size,
        created_at=created,
        modified_at=modified,
    )


def fetch_metadata(oracle: MetadataOracle, path: Path) -> PathMetadata:
    """Ask ``oracle`` about ``path``, reporting OS failures as transfer errors.

    Raises:
        TransferIOError: If the path cannot be inspected, for example on a
            permission error or a symlink loop.
    """
    try:
        return oracle(path)
    except TransferIOError:
        raise
    except OSError as exc:
        raise TransferIOError(path, path, exc, f"Could not inspect {path}: {exc}") from exc


__all__ = ["MetadataOracle", "fetch_metadata", "stat_path"]
