"""Configuration management for filewarden."""

from __future__ import annotations

import os
import textwrap
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping

import yaml

from .exceptions import ConfigError
from .models import (
    CLIOptions,
    DetectionSettings,
    FileWardenConfig,
    LoggingSettings,
    TransferSettings,
)
from .resolver import ENV_PREFIX, expand_dotted, flatten_for_env, resolve_with_precedence

DEFAULT_CONFIG_PATH = Path("~/.filewarden/config.yaml")
_CONFIG_HEADER = textwrap.dedent(
    """\
    # filewarden configuration file
    # Manage with `filewarden config edit` or `filewarden config set KEY --value VALUE`.
    # Environment variables named FILEWARDEN__SECTION__KEY override these values.
    """
)


class ConfigManager:
    """Read and write ``config.yaml`` and layer environment and CLI overrides on top."""

    def __init__(
        self,
        config_path: Path | None = None,
        *,
        env: Mapping[str, str] | None = None,
    ) -> None:
        self._config_path = (config_path or DEFAULT_CONFIG_PATH).expanduser()
        self._env = env if env is not None else os.environ

    @property
    def config_path(self) -> Path:
        """Path of the YAML file, with ``~`` expanded."""
        return self._config_path

    def load(
        self,
        *,
        cli_overrides: Mapping[str, Any] | None = None,
        include_env: bool = True,
        ensure_file: bool = True,
        env_overrides: Mapping[str, str] | None = None,
    ) -> FileWardenConfig:
        """Return the effective configuration.

        Args:
            cli_overrides: Highest-precedence overrides, usually from CLI flags.
            include_env: Whether to apply ``FILEWARDEN__*`` environment variables.
            ensure_file: Create the configuration file when it is missing.
            env_overrides: Environment mapping to use instead of ``os.environ``.

        Returns:
            FileWardenConfig: Validated configuration.

        Raises:
            ConfigError: If the file or an override layer is invalid.
        """
        if ensure_file:
            self.ensure_exists()

        env_layer = None
        if include_env:
            env_layer = self._extract_env(env_overrides if env_overrides is not None else self._env)

        return resolve_with_precedence(
            defaults=FileWardenConfig(),
            file_overrides=self._read_file(),
            env_overrides=env_layer or None,
            cli_overrides=cli_overrides,
        )

    def load_file_overrides(self) -> dict[str, Any]:
        """Return the unvalidated mapping stored in the file."""
        return self._read_file()

    def save(self, config: FileWardenConfig | Mapping[str, Any]) -> None:
        """Write a full configuration, or a partial mapping of overrides, to the file."""
        if isinstance(config, FileWardenConfig):
            data = config.model_dump(mode="python")
        else:
            data = dict(config)
        self._write_file(data)

    def set_value(self, key: str, value: Any) -> FileWardenConfig:
        """Store ``value`` at the dotted ``key`` and return the validated result.

        Raises:
            ConfigError: If the key is empty or the new value fails validation.
        """
        segments = [segment.strip() for segment in key.split(".") if segment.strip()]
        if not segments:
            raise ConfigError("KEY must be a dotted path such as 'transfer.index_limit'.")

        file_data = self._read_file()
        updated = expand_dotted({".".join(segments): value}, source_name="file")
        merged = _merge_file(file_data, updated)
        config = resolve_with_precedence(defaults=FileWardenConfig(), file_overrides=merged)
        self._write_file(merged)
        return config

    def ensure_exists(self) -> Path:
        """Write the default configuration unless a file is already present."""
        if not self._config_path.exists():
            self._write_file(FileWardenConfig().model_dump(mode="python"))
        return self._config_path

    def read_text(self) -> str:
        """Return the file text, or an empty string when it does not exist yet."""
        if not self._config_path.exists():
            return ""
        return self._config_path.read_text(encoding="utf-8")

    # Internal helpers -------------------------------------------------

    def _read_file(self) -> dict[str, Any]:
        if not self._config_path.exists():
            return {}

        try:
            raw = yaml.safe_load(self._config_path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Failed to parse configuration file: {exc}") from exc

        if not isinstance(raw, dict):
            raise ConfigError("Configuration file must contain a mapping at the top level.")
        return raw

    def _write_file(self, data: Mapping[str, Any]) -> None:
        self._config_path.parent.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
        body = yaml.safe_dump(dict(data), sort_keys=False)
        self._config_path.write_text(
            f"{_CONFIG_HEADER}# Last updated: {stamp}\n{body}", encoding="utf-8"
        )

    def _extract_env(self, env: Mapping[str, str]) -> dict[str, Any]:
        overrides: dict[str, Any] = {}
        for key, raw_value in env.items():
            if not key.startswith(ENV_PREFIX) or len(key) == len(ENV_PREFIX):
                continue
            dotted = ".".join(part.lower() for part in key[len(ENV_PREFIX) :].split("__"))
            try:
                overrides[dotted] = yaml.safe_load(raw_value)
            except yaml.YAMLError:
                overrides[dotted] = raw_value
        return expand_dotted(overrides, source_name="environment") if overrides else {}


def _merge_file(file_data: Mapping[str, Any], updates: Mapping[str, Any]) -> dict[str, Any]:
    merged = dict(file_data)
    for key, value in updates.items():
        current = merged.get(key)
        if isinstance(value, dict) and isinstance(current, dict):
            merged[key] = _merge_file(current, value)
        else:
            merged[key] = value
    return merged


__all__ = [
    "CLIOptions",
    "ConfigError",
    "ConfigManager",
    "DEFAULT_CONFIG_PATH",
    "DetectionSettings",
    "FileWardenConfig",
    "LoggingSettings",
    "TransferSettings",
    "flatten_for_env",
    "resolve_with_precedence",
]
