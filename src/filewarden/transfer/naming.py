"""Candidate path construction for conflict resolution."""

from __future__ import annotations

from pathlib import Path
from typing import Iterator


def format_index(index: int) -> str:
    """Render an index as at least two zero-padded digits."""
    return f"{index:02d}"


def backup_path(path: Path, suffix: str = "~") -> Path:
    """Return the backup location for ``path`` (``report.txt`` -> ``report.txt~``)."""
    return path.with_name(path.name + suffix)


def indexed_path(path: Path, index: int, separator: str = "-") -> Path:
    """Return ``path`` with an index between its stem and extension.

    Only the last extension is kept after the index, so ``a.tar.gz`` becomes
    ``a.tar-01.gz``.
    """
    return path.with_name(f"{path.stem}{separator}{format_index(index)}{path.suffix}")


def index_candidates(path: Path, separator: str = "-", limit: int = 32) -> Iterator[Path]:
    """Yield indexed alternatives to ``path`` for indices 1 through ``limit``.

    The sequence is finite and restartable: calling again yields the same
    candidates in the same order.
    """
    for index in range(1, limit + 1):
        yield indexed_path(path, index, separator)


__all__ = ["format_index", "backup_path", "indexed_path", "index_candidates"]
