"""Unit tests for configuration management."""

from pathlib import Path

import pytest

from filewarden.config import (
    ConfigError,
    ConfigManager,
    FileWardenConfig,
    flatten_for_env,
    resolve_with_precedence,
)
from filewarden.transfer import ConflictMode


def _fresh_manager(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> ConfigManager:
    monkeypatch.setenv("HOME", str(tmp_path))
    return ConfigManager()


def test_ensure_exists_creates_default_file(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch)

    path = manager.ensure_exists()

    assert path == tmp_path / ".filewarden" / "config.yaml"
    text = path.read_text(encoding="utf-8")
    assert "filewarden configuration file" in text
    assert "Last updated:" in text

    config = manager.load(include_env=False)
    assert isinstance(config, FileWardenConfig)


def test_resolve_with_precedence_respects_order(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch)
    manager.ensure_exists()

    manager.save({"transfer": {"separator": "_", "index_limit": 8}})

    env = {"FILEWARDEN__TRANSFER__INDEX_LIMIT": "16", "FILEWARDEN__TRANSFER__BACKUP_SUFFIX": ".bak"}
    cli = {"transfer.index_limit": 4}

    config = manager.load(cli_overrides=cli, env_overrides=env)

    assert config.transfer.separator == "_"
    assert config.transfer.backup_suffix == ".bak"
    # CLI overrides take precedence over environment
    assert config.transfer.index_limit == 4


def test_invalid_yaml_raises_config_error(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch)
    manager.ensure_exists()

    manager.config_path.write_text("- not-a-mapping", encoding="utf-8")

    with pytest.raises(ConfigError):
        manager.load()


def test_flatten_for_env_round_trips_defaults() -> None:
    flat = flatten_for_env(FileWardenConfig())

    assert flat["FILEWARDEN__TRANSFER__CONFLICT_MODE"] == "index_rename"
    assert flat["FILEWARDEN__TRANSFER__INDEX_LIMIT"] == "32"
    assert flat["FILEWARDEN__LOGGING__FILE"] == "null"


def test_resolve_with_precedence_invalid_value_raises() -> None:
    with pytest.raises(ConfigError):
        resolve_with_precedence(
            defaults=FileWardenConfig(),
            file_overrides={"transfer": {"index_limit": 0}},
        )


def test_unknown_keys_are_rejected() -> None:
    with pytest.raises(ConfigError):
        resolve_with_precedence(
            defaults=FileWardenConfig(),
            cli_overrides={"transfer.colour": "blue"},
        )


def test_set_value_persists_and_validates(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch)
    manager.ensure_exists()

    config = manager.set_value("transfer.conflict_mode", "backup_suffix")

    assert config.transfer.conflict_mode == "backup_suffix"
    assert manager.load(include_env=False).transfer.conflict_mode == "backup_suffix"

    before = manager.read_text()
    with pytest.raises(ConfigError):
        manager.set_value("transfer.conflict_mode", "shred")
    assert manager.read_text() == before


def test_transfer_settings_build_policy() -> None:
    config = resolve_with_precedence(
        defaults=FileWardenConfig(),
        cli_overrides={
            "transfer.conflict_mode": "fail_if_exists",
            "transfer.separator": "_",
            "transfer.error_on_exist": False,
        },
    )

    policy = config.transfer.to_policy()

    assert policy.mode is ConflictMode.FAIL_IF_EXISTS
    assert policy.separator == "_"
    assert policy.error_on_exist is False
    assert policy.limit == 32
