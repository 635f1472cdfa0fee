"""Orchestration of single copy and move requests."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from .errors import ExistsError, NotFoundError, TransferIOError
from .metadata import MetadataOracle, fetch_metadata, stat_path
from .models import ConflictMode, ConflictPolicy, ResolvedAction, TransferMode, TransferOutcome
from .primitives import ShutilPrimitive, TransferPrimitive
from .resolver import ConflictResolver

LOGGER = logging.getLogger(__name__)


class TransferEngine:
    """Copy or move files and directories under a conflict policy.

    Each request checks the source, resolves the destination, and then hands
    the byte transfer to the OS primitive with overwrite enabled at the
    resolved path. Resolution and execution are not atomic: a file created at
    the resolved path by another process in between will be overwritten.
    """

    def __init__(
        self,
        resolver: ConflictResolver | None = None,
        primitive: TransferPrimitive | None = None,
        oracle: MetadataOracle = stat_path,
    ) -> None:
        self.oracle = oracle
        self.primitive = primitive or ShutilPrimitive()
        self.resolver = resolver or ConflictResolver(oracle=oracle, primitive=self.primitive)

    def execute(
        self,
        source: Path,
        destination: Path,
        mode: TransferMode = TransferMode.COPY,
        policy: ConflictPolicy | None = None,
        *,
        ensure_dir: bool = True,
        dry_run: bool = False,
    ) -> TransferOutcome:
        """Transfer ``source`` to ``destination`` and describe what happened.

        Args:
            source: File or directory to transfer.
            destination: Requested destination path.
            mode: Copy or move.
            policy: Conflict policy; defaults to ``ConflictPolicy()``.
            ensure_dir: Create the destination's parent directory when missing.
            dry_run: Resolve the destination without touching the filesystem.

        Returns:
            TransferOutcome: Resolved destination and whether the transfer ran.

        Raises:
            NotFoundError: If the source is missing and the policy requires it.
            ExistsError: If the destination conflict cannot be resolved and the
                policy requires an error.
            TransferIOError: If a path cannot be inspected or the OS copy,
                move, or rename fails.
        """
        policy = policy or ConflictPolicy()
        outcome = TransferOutcome(source=source, requested=destination, mode=mode, dry_run=dry_run)

        if not fetch_metadata(self.oracle, source).exists:
            if policy.error_on_no_source:
                raise NotFoundError(source)
            LOGGER.warning("Source %s does not exist; nothing to %s.", source, mode.value)
            outcome.skipped = True
            return outcome

        if policy.mode in (ConflictMode.OVERWRITE, ConflictMode.BACKUP_SUFFIX) and _same_path(
            source, destination
        ):
            if policy.error_on_exist:
                raise ExistsError(destination, "Source and destination are the same")
            LOGGER.warning("Source and destination are the same: %s; skipping.", source)
            outcome.skipped = True
            return outcome

        action = self.resolver.resolve(destination, policy, dry_run=dry_run)
        outcome.backup_path = action.backup_path
        if not action.proceed:
            outcome.skipped = action.skipped
            return outcome

        outcome.destination = action.destination
        if dry_run:
            LOGGER.info("Dry run: would %s %s to %s", mode.value, source, action.destination)
            outcome.transferred = True
            return outcome

        self._run(source, action.destination, mode, ensure_dir=ensure_dir)
        outcome.transferred = True
        return outcome

    def transfer(
        self,
        source: Path,
        destination: Path,
        mode: TransferMode = TransferMode.COPY,
        policy: ConflictPolicy | None = None,
        *,
        ensure_dir: bool = True,
        dry_run: bool = False,
    ) -> bool:
        """Transfer ``source`` to ``destination``; return True when it ran."""
        outcome = self.execute(
            source, destination, mode, policy, ensure_dir=ensure_dir, dry_run=dry_run
        )
        return outcome.transferred

    def copy(self, source: Path, destination: Path, policy: ConflictPolicy | None = None) -> bool:
        return self.transfer(source, destination, TransferMode.COPY, policy)

    def move(self, source: Path, destination: Path, policy: ConflictPolicy | None = None) -> bool:
        return self.transfer(source, destination, TransferMode.MOVE, policy)

    def backup(
        self,
        path: Path,
        policy: ConflictPolicy | None = None,
        *,
        dry_run: bool = False,
    ) -> ResolvedAction:
        """Move the occupant of ``path`` aside; see :meth:`ConflictResolver.backup`."""
        return self.resolver.backup(path, policy, dry_run=dry_run)

    async def transfer_async(
        self,
        source: Path,
        destination: Path,
        mode: TransferMode = TransferMode.COPY,
        policy: ConflictPolicy | None = None,
        *,
        ensure_dir: bool = True,
    ) -> bool:
        """Run :meth:`transfer` on the event loop's default executor."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            None,
            lambda: self.transfer(source, destination, mode, policy, ensure_dir=ensure_dir),
        )

    def _run(self, source: Path, destination: Path, mode: TransferMode, *, ensure_dir: bool) -> None:
        try:
            if ensure_dir:
                destination.parent.mkdir(parents=True, exist_ok=True)
            if mode is TransferMode.MOVE:
                self.primitive.move(source, destination, overwrite=True)
            else:
                self.primitive.copy(source, destination, overwrite=True)
        except OSError as exc:
            raise TransferIOError(source, destination, exc) from exc
        LOGGER.info("%s %s -> %s", mode.value.capitalize(), source, destination)


def _same_path(first: Path, second: Path) -> bool:
    try:
        return first.resolve() == second.resolve()
    except OSError:
        return first == second


__all__ = ["TransferEngine"]
