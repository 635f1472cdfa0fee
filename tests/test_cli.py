"""CLI integration tests for detection and transfer commands."""

from __future__ import annotations

import json
import os
import zipfile
from pathlib import Path
from typing import Any

from click.testing import CliRunner

from filewarden.cli import cli


def _env_with_home(tmp_path: Path) -> dict[str, Any]:
    env = {key: value for key, value in os.environ.items() if not key.startswith("FILEWARDEN__")}
    env["HOME"] = str(tmp_path / "home")
    env["FILEWARDEN__LOGGING__LEVEL"] = "ERROR"
    return env


def _write(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def test_cli_help_lists_commands() -> None:
    runner = CliRunner()

    result = runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    for command in ("detect", "copy", "move", "backup", "config"):
        assert command in result.output


def test_detect_json_reports_types(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)
    png = tmp_path / "image.bin"
    png.write_bytes(b"\x89PNG\r\n\x1a\n" + b"\x00" * 32)
    docx = tmp_path / "report.docx"
    with zipfile.ZipFile(docx, "w") as archive:
        archive.writestr("word/document.xml", "<w:document/>")
    blob = tmp_path / "blob.dat"
    blob.write_bytes(b"\x00" * 64)

    result = runner.invoke(cli, ["detect", str(png), str(docx), str(blob), "--json"], env=env)

    assert result.exit_code == 0
    payload = json.loads(result.output)
    by_name = {Path(item["path"]).name: item for item in payload["files"]}
    assert by_name["image.bin"]["type"] == "png"
    assert by_name["image.bin"]["category"] == "image"
    assert by_name["report.docx"]["type"] == "docx"
    assert by_name["blob.dat"]["type"] is None


def test_detect_no_containers_keeps_zip(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)
    docx = tmp_path / "report.docx"
    with zipfile.ZipFile(docx, "w") as archive:
        archive.writestr("word/document.xml", "<w:document/>")

    result = runner.invoke(cli, ["detect", str(docx), "--no-containers", "--json"], env=env)

    assert result.exit_code == 0
    assert json.loads(result.output)["files"][0]["type"] == "zip"


def test_detect_table_output(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)
    pdf = tmp_path / "a.pdf"
    pdf.write_bytes(b"%PDF-1.7\n")

    result = runner.invoke(cli, ["detect", str(pdf)], env=env)

    assert result.exit_code == 0
    assert "pdf" in result.output
    assert "document" in result.output


def test_copy_resolves_conflict_with_index(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)
    source = _write(tmp_path / "in" / "report.txt", "new")
    destination = _write(tmp_path / "out" / "report.txt", "old")

    result = runner.invoke(cli, ["copy", str(source), str(destination), "--json"], env=env)

    assert result.exit_code == 0
    payload = json.loads(result.output)
    assert payload["transferred"] is True
    assert Path(payload["destination"]).name == "report-01.txt"
    assert (tmp_path / "out" / "report-01.txt").read_text(encoding="utf-8") == "new"
    assert destination.read_text(encoding="utf-8") == "old"


def test_copy_separator_flag_overrides_config(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)
    source = _write(tmp_path / "in" / "report.txt", "new")
    destination = _write(tmp_path / "out" / "report.txt", "old")

    result = runner.invoke(
        cli, ["copy", str(source), str(destination), "--separator", "_", "--quiet"], env=env
    )

    assert result.exit_code == 0
    assert result.output == ""
    assert (tmp_path / "out" / "report_01.txt").exists()


def test_move_with_backup_suffix(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)
    source = _write(tmp_path / "in" / "notes.md", "new")
    destination = _write(tmp_path / "out" / "notes.md", "old")

    result = runner.invoke(
        cli,
        ["move", str(source), str(destination), "--on-conflict", "backup_suffix"],
        env=env,
    )

    assert result.exit_code == 0
    assert "Moved" in result.output
    assert not source.exists()
    assert destination.read_text(encoding="utf-8") == "new"
    assert (tmp_path / "out" / "notes.md~").read_text(encoding="utf-8") == "old"


def test_fail_if_exists_reports_json_error(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)
    source = _write(tmp_path / "a.txt", "new")
    destination = _write(tmp_path / "b.txt", "old")

    result = runner.invoke(
        cli,
        ["copy", str(source), str(destination), "--on-conflict", "fail_if_exists", "--json"],
        env=env,
    )

    assert result.exit_code == 1
    payload = json.loads(result.output)
    assert payload["error"]["code"] == "destination_exists"
    assert Path(payload["error"]["details"]["path"]) == destination
    assert destination.read_text(encoding="utf-8") == "old"


def test_fail_if_exists_can_skip(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)
    source = _write(tmp_path / "a.txt", "new")
    destination = _write(tmp_path / "b.txt", "old")

    result = runner.invoke(
        cli,
        [
            "move",
            str(source),
            str(destination),
            "--on-conflict",
            "fail_if_exists",
            "--no-error-on-exist",
        ],
        env=env,
    )

    assert result.exit_code == 0
    assert "Skipped" in result.output
    assert source.exists()


def test_missing_source_error_code(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)

    result = runner.invoke(
        cli,
        [
            "copy",
            str(tmp_path / "missing.txt"),
            str(tmp_path / "out.txt"),
            "--error-on-no-source",
            "--json",
        ],
        env=env,
    )

    assert result.exit_code == 1
    assert json.loads(result.output)["error"]["code"] == "source_missing"


def test_missing_source_without_flag_is_skipped(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)

    result = runner.invoke(
        cli, ["copy", str(tmp_path / "missing.txt"), str(tmp_path / "out.txt"), "--json"], env=env
    )

    assert result.exit_code == 0
    payload = json.loads(result.output)
    assert payload["skipped"] is True
    assert payload["transferred"] is False


def test_dry_run_leaves_files(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)
    source = _write(tmp_path / "a.txt", "new")
    destination = tmp_path / "out" / "a.txt"

    result = runner.invoke(cli, ["move", str(source), str(destination), "--dry-run"], env=env)

    assert result.exit_code == 0
    assert "Would move" in result.output
    assert source.exists()
    assert not destination.exists()


def test_backup_command_moves_file_aside(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)
    path = _write(tmp_path / "settings.ini", "v1")

    result = runner.invoke(cli, ["backup", str(path), "--json"], env=env)

    assert result.exit_code == 0
    payload = json.loads(result.output)
    assert Path(payload["backup_path"]).name == "settings.ini~"
    assert not path.exists()
    assert (tmp_path / "settings.ini~").read_text(encoding="utf-8") == "v1"


def test_quiet_default_from_config(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)
    env["FILEWARDEN__CLI__QUIET_DEFAULT"] = "true"
    source = _write(tmp_path / "a.txt", "data")

    result = runner.invoke(cli, ["copy", str(source), str(tmp_path / "b.txt")], env=env)

    assert result.exit_code == 0
    assert result.output == ""
    assert (tmp_path / "b.txt").exists()
