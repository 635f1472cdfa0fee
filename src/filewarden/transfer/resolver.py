"""Destination conflict resolution."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from .errors import ExistsError, NotFoundError, TransferIOError
from .metadata import MetadataOracle, fetch_metadata, stat_path
from .models import ConflictMode, ConflictPolicy, PathMetadata, ResolvedAction
from .naming import backup_path, index_candidates
from .primitives import ShutilPrimitive, TransferPrimitive

LOGGER = logging.getLogger(__name__)


class ConflictResolver:
    """Decide where a transfer may land without clobbering existing data.

    Resolution only reads filesystem metadata, with one exception: the
    backup-suffix policy renames the current occupant aside before reporting
    success, so the slot is vacant when the caller transfers into it.
    """

    def __init__(
        self,
        oracle: MetadataOracle = stat_path,
        primitive: TransferPrimitive | None = None,
    ) -> None:
        self.oracle = oracle
        self.primitive = primitive or ShutilPrimitive()

    def resolve(
        self,
        destination: Path,
        policy: ConflictPolicy | None = None,
        *,
        metadata: PathMetadata | None = None,
        dry_run: bool = False,
    ) -> ResolvedAction:
        """Compute the action for a transfer into ``destination``.

        Args:
            destination: Path the caller wants to write.
            policy: Conflict policy; defaults to ``ConflictPolicy()``.
            metadata: Snapshot of ``destination`` if the caller already has one.
            dry_run: Skip the backup rename and only report the decision.

        Returns:
            ResolvedAction: Whether to proceed and the path to write.

        Raises:
            ExistsError: If the conflict cannot be resolved and the policy
                requires an error.
            TransferIOError: If the destination cannot be inspected or moving
                the occupant to its backup path fails.
        """
        policy = policy or ConflictPolicy()
        snapshot = metadata if metadata is not None else fetch_metadata(self.oracle, destination)
        if not snapshot.exists:
            return ResolvedAction(proceed=True, destination=destination)

        LOGGER.debug("Destination %s is occupied; applying %s.", destination, policy.mode.value)

        if policy.mode is ConflictMode.OVERWRITE:
            return ResolvedAction(proceed=True, destination=destination, conflict=True)

        if policy.mode is ConflictMode.BACKUP_SUFFIX:
            target = backup_path(destination, policy.suffix)
            if not dry_run:
                self._move_occupant(destination, target)
            return ResolvedAction(
                proceed=True, destination=destination, conflict=True, backup_path=target
            )

        if policy.mode is ConflictMode.INDEX_RENAME:
            candidate = self.find_available(destination, policy)
            if candidate is None:
                return self._unresolved(
                    destination,
                    policy,
                    f"No free indexed name within {policy.limit} attempts",
                )
            LOGGER.info("Destination %s is occupied; using %s instead.", destination, candidate)
            return ResolvedAction(proceed=True, destination=candidate, conflict=True)

        return self._unresolved(destination, policy, "Destination already exists")

    def backup(
        self,
        path: Path,
        policy: ConflictPolicy | None = None,
        *,
        metadata: PathMetadata | None = None,
        dry_run: bool = False,
    ) -> ResolvedAction:
        """Vacate ``path`` by moving its current occupant aside.

        Backup-suffix moves the occupant to ``path + suffix``; index-rename
        moves it to the first free indexed name. Overwrite leaves the occupant
        in place for the caller to replace.

        Args:
            path: Path to vacate.
            policy: Conflict policy; defaults to ``ConflictPolicy()``.
            metadata: Snapshot of ``path`` if the caller already has one.
            dry_run: Report the backup location without renaming anything.

        Returns:
            ResolvedAction: ``backup_path`` names where the occupant went.

        Raises:
            NotFoundError: If nothing occupies ``path`` and the policy requires it.
            ExistsError: If no backup location is available and the policy
                requires an error.
            TransferIOError: If the path cannot be inspected or the rename fails.
        """
        policy = policy or ConflictPolicy()
        snapshot = metadata if metadata is not None else fetch_metadata(self.oracle, path)
        if not snapshot.exists:
            if policy.error_on_no_source:
                raise NotFoundError(path, "Nothing to back up")
            return ResolvedAction(proceed=True, destination=path)

        if policy.mode is ConflictMode.OVERWRITE:
            return ResolvedAction(proceed=True, destination=path, conflict=True)

        if policy.mode is ConflictMode.FAIL_IF_EXISTS:
            return self._unresolved(path, policy, "Destination already exists")

        if policy.mode is ConflictMode.BACKUP_SUFFIX:
            target = backup_path(path, policy.suffix)
        else:
            found = self.find_available(path, policy)
            if found is None:
                return self._unresolved(
                    path, policy, f"No free indexed name within {policy.limit} attempts"
                )
            target = found

        if not dry_run:
            self._move_occupant(path, target)
        return ResolvedAction(proceed=True, destination=path, conflict=True, backup_path=target)

    def find_available(self, path: Path, policy: ConflictPolicy) -> Path | None:
        """Return the first indexed alternative to ``path`` that is vacant.

        Each candidate is checked with a fresh metadata fetch, in order, up to
        ``policy.limit``.
        """
        for candidate in index_candidates(path, policy.separator, policy.limit):
            if not fetch_metadata(self.oracle, candidate).exists:
                return candidate
        return None

    async def resolve_async(
        self,
        destination: Path,
        policy: ConflictPolicy | None = None,
        *,
        dry_run: bool = False,
    ) -> ResolvedAction:
        """Run :meth:`resolve` on the event loop's default executor."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            None, lambda: self.resolve(destination, policy, dry_run=dry_run)
        )

    def _move_occupant(self, path: Path, target: Path) -> None:
        LOGGER.info("Backing up %s to %s", path, target)
        try:
            self.primitive.rename(path, target, overwrite=True)
        except OSError as exc:
            raise TransferIOError(path, target, exc) from exc

    def _unresolved(self, path: Path, policy: ConflictPolicy, message: str) -> ResolvedAction:
        if policy.error_on_exist:
            raise ExistsError(path, message)
        LOGGER.warning("%s: %s; skipping.", message, path)
        return ResolvedAction(proceed=False, destination=path, skipped=True, conflict=True)


__all__ = ["ConflictResolver"]
