"""Configuration models describing filewarden settings."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from filewarden.transfer.models import ConflictMode, ConflictPolicy


class FileWardenBaseModel(BaseModel):
    """Shared configuration for filewarden Pydantic models."""

    model_config = ConfigDict(extra="forbid")


class TransferSettings(FileWardenBaseModel):
    """Defaults applied to copy, move, and backup requests.

    Attributes:
        conflict_mode: Strategy used when a destination is occupied.
        separator: Separator placed before the index for index renames.
        backup_suffix: Suffix appended to backed-up occupants.
        index_limit: Highest index tried by index renames.
        error_on_no_source: Whether a missing source is an error.
        error_on_exist: Whether an unresolved conflict is an error.
        ensure_dir: Whether to create missing destination directories.
    """

    conflict_mode: Literal["overwrite", "backup_suffix", "index_rename", "fail_if_exists"] = (
        "index_rename"
    )
    separator: str = "-"
    backup_suffix: str = Field(default="~", min_length=1)
    index_limit: int = Field(default=32, ge=1)
    error_on_no_source: bool = False
    error_on_exist: bool = True
    ensure_dir: bool = True

    def to_policy(self) -> ConflictPolicy:
        """Return the conflict policy described by these settings."""
        return ConflictPolicy(
            mode=ConflictMode(self.conflict_mode),
            separator=self.separator,
            suffix=self.backup_suffix,
            limit=self.index_limit,
            error_on_no_source=self.error_on_no_source,
            error_on_exist=self.error_on_exist,
        )


class DetectionSettings(FileWardenBaseModel):
    """Options for path-based type detection.

    Attributes:
        inspect_containers: Whether to open ZIP archives to refine their type.
        sniff_text: Whether to recognise JSON text when no signature matches.
    """

    inspect_containers: bool = True
    sniff_text: bool = True


class LoggingSettings(FileWardenBaseModel):
    """Runtime logging configuration.

    Attributes:
        level: Logging verbosity level.
        file: Optional log file path; console-only when unset.
        max_size_mb: Maximum log size before rotation.
        backup_count: Number of historical log files to retain.
    """

    level: str = "WARNING"
    file: Optional[str] = None
    max_size_mb: int = 100
    backup_count: int = 5


class CLIOptions(FileWardenBaseModel):
    """CLI behavior defaults.

    Attributes:
        quiet_default: Whether commands suppress non-error output by default.
    """

    quiet_default: bool = False


class FileWardenConfig(FileWardenBaseModel):
    """Top-level configuration struct for filewarden.

    Attributes:
        transfer: Copy, move, and backup defaults.
        detection: Type detection options.
        logging: Logging configuration.
        cli: CLI presentation defaults.
    """

    transfer: TransferSettings = Field(default_factory=TransferSettings)
    detection: DetectionSettings = Field(default_factory=DetectionSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    cli: CLIOptions = Field(default_factory=CLIOptions)


__all__ = [
    "FileWardenBaseModel",
    "TransferSettings",
    "DetectionSettings",
    "LoggingSettings",
    "CLIOptions",
    "FileWardenConfig",
]
