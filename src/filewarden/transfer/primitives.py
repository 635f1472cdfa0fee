"""OS-level copy, move, and rename primitives."""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Protocol


class TransferPrimitive(Protocol):
    """Byte-moving operations the transfer engine delegates to."""

    def copy(self, source: Path, destination: Path, *, overwrite: bool) -> None:
        """Copy a file or directory tree to ``destination``."""

    def move(self, source: Path, destination: Path, *, overwrite: bool) -> None:
        """Move a file or directory tree to ``destination``."""

    def rename(self, source: Path, destination: Path, *, overwrite: bool) -> None:
        """Rename ``source`` to ``destination`` in place."""


class ShutilPrimitive:
    """Transfer primitive backed by :mod:`shutil`.

    With ``overwrite`` the destination slot is cleared first, except that a
    directory copied onto an existing directory is merged into it. Without
    ``overwrite`` an occupied destination raises :class:`FileExistsError`.
    """

    def copy(self, source: Path, destination: Path, *, overwrite: bool) -> None:
        if source.is_dir():
            if _occupied(destination) and not destination.is_dir():
                self._clear(destination, overwrite)
            elif destination.is_dir() and not overwrite:
                raise FileExistsError(f"Destination already exists: {destination}")
            shutil.copytree(source, destination, symlinks=True, dirs_exist_ok=overwrite)
            return

        if _occupied(destination):
            self._clear(destination, overwrite)
        shutil.copy2(source, destination)

    def move(self, source: Path, destination: Path, *, overwrite: bool) -> None:
        if _occupied(destination):
            self._clear(destination, overwrite)
        shutil.move(str(source), str(destination))

    def rename(self, source: Path, destination: Path, *, overwrite: bool) -> None:
        self.move(source, destination, overwrite=overwrite)

    def _clear(self, destination: Path, overwrite: bool) -> None:
        if not overwrite:
            raise FileExistsError(f"Destination already exists: {destination}")
        if destination.is_dir() and not destination.is_symlink():
            shutil.rmtree(destination)
        else:
            destination.unlink()


def _occupied(path: Path) -> bool:
    return path.exists() or path.is_symlink()


__all__ = ["TransferPrimitive", "ShutilPrimitive"]
