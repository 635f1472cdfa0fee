"""Configuration precedence helpers."""

from __future__ import annotations

from collections.abc import Mapping as MappingABC
from copy import deepcopy
from typing import Any, Dict, Iterable, Mapping

import yaml
from pydantic import ValidationError

from .exceptions import ConfigError
from .models import FileWardenConfig

ENV_PREFIX = "FILEWARDEN__"


def resolve_with_precedence(
    *,
    defaults: FileWardenConfig,
    file_overrides: Mapping[str, Any] | None = None,
    env_overrides: Mapping[str, Any] | None = None,
    cli_overrides: Mapping[str, Any] | None = None,
) -> FileWardenConfig:
    """Merge configuration layers; later layers win.

    Precedence from lowest to highest: defaults, file, environment, CLI.
    Override keys may be nested mappings or dotted paths such as
    ``"transfer.index_limit"``.

    Raises:
        ConfigError: If a layer is malformed or the merged result is invalid.
    """
    merged: dict[str, Any] = defaults.model_dump(mode="python")
    layers = (("file", file_overrides), ("environment", env_overrides), ("cli", cli_overrides))
    for name, layer in layers:
        if layer is not None:
            merged = _deep_merge(merged, expand_dotted(layer, source_name=name))

    try:
        return FileWardenConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration values: {exc}") from exc


def flatten_for_env(config: FileWardenConfig) -> Dict[str, str]:
    """Render the config as ``FILEWARDEN__SECTION__KEY`` environment variables."""
    flat: Dict[str, str] = {}
    for path, value in _walk(config.model_dump(mode="python"), ()):
        key = ENV_PREFIX + "__".join(part.upper() for part in path)
        if isinstance(value, list):
            flat[key] = yaml.safe_dump(value, default_flow_style=True).strip()
        elif value is None:
            flat[key] = "null"
        else:
            flat[key] = str(value)
    return flat


def expand_dotted(source: Mapping[str, Any], *, source_name: str = "cli") -> dict[str, Any]:
    """Expand dotted keys into nested dictionaries.

    Raises:
        ConfigError: If ``source`` is not a mapping, a key is not a string, or
            a dotted path collides with a scalar value.
    """
    if not isinstance(source, MappingABC):
        raise ConfigError(f"{source_name.capitalize()} overrides must be a mapping.")

    result: dict[str, Any] = {}
    for key, value in source.items():
        if not isinstance(key, str):
            raise ConfigError(f"{source_name.capitalize()} override keys must be strings.")
        *parents, leaf = key.split(".")
        node = result
        for segment in parents:
            child = node.setdefault(segment, {})
            if not isinstance(child, dict):
                raise ConfigError(
                    f"{source_name.capitalize()} override for {key} conflicts with existing value."
                )
            node = child
        if isinstance(value, MappingABC):
            nested = expand_dotted(value, source_name=source_name)
            current = node.get(leaf)
            node[leaf] = _deep_merge(current, nested) if isinstance(current, dict) else nested
        else:
            node[leaf] = value
    return result


def _walk(data: Mapping[str, Any], prefix: tuple[str, ...]) -> Iterable[tuple[tuple[str, ...], Any]]:
    for key, value in data.items():
        path = prefix + (str(key),)
        if isinstance(value, MappingABC):
            yield from _walk(value, path)
        else:
            yield path, value


def _deep_merge(base: Mapping[str, Any], overrides: Mapping[str, Any]) -> dict[str, Any]:
    merged = deepcopy(dict(base))
    for key, value in overrides.items():
        current = merged.get(key)
        if isinstance(value, MappingABC) and isinstance(current, MappingABC):
            merged[key] = _deep_merge(current, value)
        else:
            merged[key] = deepcopy(value)
    return merged


__all__ = ["ENV_PREFIX", "resolve_with_precedence", "flatten_for_env", "expand_dotted"]
