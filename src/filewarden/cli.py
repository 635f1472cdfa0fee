"""Command line interface for filewarden."""

from __future__ import annotations

import difflib
import functools
from pathlib import Path
from typing import Any, Callable

import click
import yaml
from click.core import ParameterSource
from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

from filewarden.config import ConfigError, ConfigManager, FileWardenConfig, resolve_with_precedence
from filewarden.detection import TypeClassifier, TypeDetector
from filewarden.log import configure_logging
from filewarden.transfer import (
    ExistsError,
    NotFoundError,
    TransferEngine,
    TransferError,
    TransferIOError,
    TransferMode,
)

console = Console()

_CONFLICT_CHOICES = ["overwrite", "backup_suffix", "index_rename", "fail_if_exists"]

_ERROR_CODES: tuple[tuple[type[Exception], str], ...] = (
    (NotFoundError, "source_missing"),
    (ExistsError, "destination_exists"),
    (TransferIOError, "io_error"),
    (TransferError, "transfer_error"),
    (ConfigError, "config_error"),
)


def _handle_cli_error(
    message: str,
    *,
    code: str,
    json_output: bool,
    details: Any | None = None,
    original: Exception | None = None,
) -> None:
    """Emit a standardized error and terminate the command appropriately.

    Args:
        message: Human-readable error message.
        code: Machine-readable error identifier.
        json_output: Indicates whether JSON mode is active.
        details: Optional structured details to include in the payload.
        original: Original exception for chaining when not using JSON.

    Raises:
        SystemExit: When emitting JSON output to terminate the command.
        click.ClickException: For non-JSON flows to surface the error.
    """

    if json_output:
        payload: dict[str, Any] = {"error": {"code": code, "message": message}}
        if details is not None:
            payload["error"]["details"] = details
        console.print_json(data=payload)
        raise SystemExit(1)

    if isinstance(original, click.ClickException):
        raise original

    raise click.ClickException(message) from original


def _error_details(exc: Exception) -> dict[str, str] | None:
    if isinstance(exc, (NotFoundError, ExistsError)):
        return {"path": str(exc.path)}
    if isinstance(exc, TransferIOError):
        return {"source": str(exc.source), "destination": str(exc.destination)}
    return None


def _report_failure(exc: Exception, *, json_output: bool) -> None:
    code = next((name for kind, name in _ERROR_CODES if isinstance(exc, kind)), "internal_error")
    _handle_cli_error(
        str(exc),
        code=code,
        json_output=json_output,
        details=_error_details(exc),
        original=exc,
    )


def _emit_message(message: Any, *, quiet: bool, mode: str = "detail") -> None:
    """Print CLI output unless quiet mode suppresses it.

    Args:
        message: Renderable or string to emit.
        quiet: Whether quiet mode is active.
        mode: Output mode identifier (`detail`, `warning`, or `error`).
    """

    if quiet and mode != "error":
        return
    console.print(message)


def _load_config(cli_overrides: dict[str, Any] | None = None) -> FileWardenConfig:
    config = ConfigManager().load(cli_overrides=cli_overrides)
    configure_logging(config.logging)
    return config


def _quiet_enabled(ctx: click.Context, quiet: bool, config: FileWardenConfig) -> bool:
    if ctx.get_parameter_source("quiet") == ParameterSource.COMMANDLINE:
        return quiet
    return config.cli.quiet_default


def _policy_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Attach conflict-policy flags shared by the transfer commands."""
    options = [
        click.option(
            "--on-conflict",
            "conflict_mode",
            type=click.Choice(_CONFLICT_CHOICES),
            help="Strategy when the destination already exists.",
        ),
        click.option("--separator", type=str, help="Separator placed before rename indices."),
        click.option("--suffix", "backup_suffix", type=str, help="Suffix for backup copies."),
        click.option("--limit", "index_limit", type=click.IntRange(min=1), help="Highest index."),
        click.option(
            "--error-on-exist/--no-error-on-exist",
            default=None,
            help="Fail instead of skipping when a conflict cannot be resolved.",
        ),
        click.option(
            "--error-on-no-source/--no-error-on-no-source",
            default=None,
            help="Fail instead of skipping when the source is missing.",
        ),
        click.option(
            "--ensure-dir/--no-ensure-dir",
            default=None,
            help="Create missing destination directories.",
        ),
        click.option("--dry-run", is_flag=True, help="Resolve without modifying files."),
        click.option("--json", "json_output", is_flag=True, help="Emit JSON output."),
        click.option("--quiet", is_flag=True, help="Suppress non-error output."),
    ]
    for option in reversed(options):
        func = option(func)

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        overrides = {
            f"transfer.{key}": kwargs.pop(key)
            for key in (
                "conflict_mode",
                "separator",
                "backup_suffix",
                "index_limit",
                "error_on_exist",
                "error_on_no_source",
                "ensure_dir",
            )
        }
        kwargs["overrides"] = {key: value for key, value in overrides.items() if value is not None}
        return func(*args, **kwargs)

    return wrapper


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="filewarden")
def cli() -> None:
    """filewarden identifies files by content and relocates them without clobbering.

    Returns:
        None: This function is invoked for its side effects.
    """


@cli.command()
@click.argument(
    "paths",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option("--no-containers", is_flag=True, help="Skip ZIP container inspection.")
@click.option("--json", "json_output", is_flag=True, help="Emit JSON describing detections.")
def detect(paths: tuple[Path, ...], no_containers: bool, json_output: bool) -> None:
    """Identify the type and category of each file in PATHS from its leading bytes.

    Args:
        paths: Files to inspect.
        no_containers: When True, report ZIP-based files by their outer signature.
        json_output: If True, emit JSON instead of a table.
    """
    try:
        config = _load_config()
    except ConfigError as exc:
        _report_failure(exc, json_output=json_output)
        return

    detector = TypeDetector(
        TypeClassifier(sniff_text=config.detection.sniff_text),
        inspect_containers=config.detection.inspect_containers and not no_containers,
    )

    rows: list[dict[str, Any]] = []
    for path in paths:
        try:
            result = detector.detect(path)
        except OSError as exc:
            rows.append({"path": str(path), "type": None, "category": None, "error": str(exc)})
            continue
        rows.append({"path": str(path), "type": result.type_id, "category": result.category})

    if json_output:
        console.print_json(data={"files": rows})
        return

    table = Table(title="Detected types")
    table.add_column("Path", overflow="fold")
    table.add_column("Type")
    table.add_column("Category")
    for row in rows:
        if "error" in row:
            table.add_row(row["path"], "[red]error[/red]", row["error"])
        else:
            table.add_row(row["path"], row["type"] or "unknown", row["category"] or "unknown")
    console.print(table)


def _run_transfer(
    ctx: click.Context,
    mode: TransferMode,
    source: Path,
    destination: Path,
    *,
    overrides: dict[str, Any],
    dry_run: bool,
    json_output: bool,
    quiet: bool,
) -> None:
    try:
        config = _load_config(overrides)
        quiet_enabled = _quiet_enabled(ctx, quiet, config)
        engine = TransferEngine()
        outcome = engine.execute(
            source,
            destination,
            mode,
            config.transfer.to_policy(),
            ensure_dir=config.transfer.ensure_dir,
            dry_run=dry_run,
        )
    except (TransferError, ConfigError) as exc:
        _report_failure(exc, json_output=json_output)
        return

    if json_output:
        console.print_json(data=outcome.model_dump(mode="json"))
        return

    verb = "copy" if mode is TransferMode.COPY else "move"
    if outcome.skipped:
        _emit_message(
            f"[yellow]Skipped {verb} of {source}; destination {destination} left unchanged.[/yellow]",
            quiet=quiet_enabled,
            mode="warning",
        )
        return

    if outcome.backup_path is not None:
        prefix = "Would back up" if dry_run else "Backed up"
        _emit_message(
            f"[cyan]{prefix} {destination} to {outcome.backup_path}.[/cyan]", quiet=quiet_enabled
        )
    past = "Copied" if mode is TransferMode.COPY else "Moved"
    prefix = f"Would {verb}" if dry_run else past
    _emit_message(
        f"[green]{prefix} {source} -> {outcome.destination}.[/green]", quiet=quiet_enabled
    )


@cli.command()
@click.argument("source", type=click.Path(path_type=Path))
@click.argument("destination", type=click.Path(path_type=Path))
@_policy_options
@click.pass_context
def copy(
    ctx: click.Context,
    source: Path,
    destination: Path,
    overrides: dict[str, Any],
    dry_run: bool,
    json_output: bool,
    quiet: bool,
) -> None:
    """Copy SOURCE to DESTINATION, resolving conflicts by the configured policy.

    Args:
        ctx: Click context used for parameter source inspection.
        source: File or directory to copy.
        destination: Requested destination path.
        overrides: Transfer settings supplied on the command line.
        dry_run: If True, resolve the destination without copying.
        json_output: If True, emit the outcome as JSON.
        quiet: When True, suppress non-error output.
    """
    _run_transfer(
        ctx,
        TransferMode.COPY,
        source,
        destination,
        overrides=overrides,
        dry_run=dry_run,
        json_output=json_output,
        quiet=quiet,
    )


@cli.command()
@click.argument("source", type=click.Path(path_type=Path))
@click.argument("destination", type=click.Path(path_type=Path))
@_policy_options
@click.pass_context
def move(
    ctx: click.Context,
    source: Path,
    destination: Path,
    overrides: dict[str, Any],
    dry_run: bool,
    json_output: bool,
    quiet: bool,
) -> None:
    """Move SOURCE to DESTINATION, resolving conflicts by the configured policy.

    Args:
        ctx: Click context used for parameter source inspection.
        source: File or directory to move.
        destination: Requested destination path.
        overrides: Transfer settings supplied on the command line.
        dry_run: If True, resolve the destination without moving.
        json_output: If True, emit the outcome as JSON.
        quiet: When True, suppress non-error output.
    """
    _run_transfer(
        ctx,
        TransferMode.MOVE,
        source,
        destination,
        overrides=overrides,
        dry_run=dry_run,
        json_output=json_output,
        quiet=quiet,
    )


@cli.command()
@click.argument("path", type=click.Path(path_type=Path))
@_policy_options
@click.pass_context
def backup(
    ctx: click.Context,
    path: Path,
    overrides: dict[str, Any],
    dry_run: bool,
    json_output: bool,
    quiet: bool,
) -> None:
    """Move the file or directory at PATH aside so the path is free.

    Args:
        ctx: Click context used for parameter source inspection.
        path: Path to vacate.
        overrides: Transfer settings supplied on the command line.
        dry_run: If True, report the backup location without renaming.
        json_output: If True, emit the action as JSON.
        quiet: When True, suppress non-error output.
    """
    overrides.setdefault("transfer.conflict_mode", "backup_suffix")
    try:
        config = _load_config(overrides)
        quiet_enabled = _quiet_enabled(ctx, quiet, config)
        action = TransferEngine().backup(path, config.transfer.to_policy(), dry_run=dry_run)
    except (TransferError, ConfigError) as exc:
        _report_failure(exc, json_output=json_output)
        return

    if json_output:
        console.print_json(data=action.model_dump(mode="json"))
        return

    if action.skipped:
        _emit_message(
            f"[yellow]Could not back up {path}; left unchanged.[/yellow]",
            quiet=quiet_enabled,
            mode="warning",
        )
    elif action.backup_path is None:
        _emit_message(f"[yellow]Nothing moved aside for {path}.[/yellow]", quiet=quiet_enabled)
    else:
        prefix = "Would back up" if dry_run else "Backed up"
        _emit_message(
            f"[green]{prefix} {path} to {action.backup_path}.[/green]", quiet=quiet_enabled
        )


@cli.group()
def config() -> None:
    """Manage filewarden configuration files and overrides.

    Returns:
        None: This function is invoked for its side effects.
    """


@config.command("view")
@click.option("--no-env", is_flag=True, help="Ignore environment overrides when displaying output.")
def config_view(no_env: bool) -> None:
    """Display the effective configuration after applying precedence rules.

    Args:
        no_env: If True, ignore environment-derived overrides.

    Raises:
        click.ClickException: If configuration cannot be loaded.
    """
    manager = ConfigManager()
    try:
        effective = manager.load(include_env=not no_env)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    yaml_text = yaml.safe_dump(effective.model_dump(mode="python"), sort_keys=False)
    console.print(Syntax(yaml_text, "yaml", word_wrap=True))


@config.command("set")
@click.argument("key")
@click.option("--value", required=True, help="Value to assign to KEY.")
def config_set(key: str, value: str) -> None:
    """Persist a configuration value expressed as a dotted KEY.

    Args:
        key: Dotted path such as ``transfer.index_limit``.
        value: YAML-literal value to write into the configuration file.

    Raises:
        click.ClickException: If parsing or validation fails.
    """
    manager = ConfigManager()
    manager.ensure_exists()
    before = manager.read_text().splitlines()

    try:
        parsed_value = yaml.safe_load(value)
    except yaml.YAMLError as exc:
        raise click.ClickException(f"Unable to parse value: {exc}") from exc

    try:
        manager.set_value(key, parsed_value)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    after = manager.read_text().splitlines()
    # The timestamp line always changes; compare the settings only.
    diff = [
        line
        for line in difflib.unified_diff(
            [line for line in before if not line.startswith("# Last updated")],
            [line for line in after if not line.startswith("# Last updated")],
            fromfile="config.yaml (before)",
            tofile="config.yaml (after)",
            lineterm="",
        )
    ]

    if not diff:
        console.print("[yellow]No changes applied; value already up to date.[/yellow]")
        return

    console.print(Syntax("\n".join(diff), "diff", word_wrap=False))
    console.print(f"[green]Updated {key}.[/green]")


@config.command("edit")
def config_edit() -> None:
    """Open the configuration file in an interactive editor session.

    Raises:
        click.ClickException: If edited content is invalid or cannot be saved.
    """
    manager = ConfigManager()
    manager.ensure_exists()

    original = manager.read_text()
    edited = click.edit(original, extension=".yaml")

    if edited is None:
        console.print("[yellow]Edit cancelled; no changes applied.[/yellow]")
        return

    if edited == original:
        console.print("[yellow]No changes detected.[/yellow]")
        return

    try:
        parsed = yaml.safe_load(edited) or {}
    except yaml.YAMLError as exc:
        raise click.ClickException(f"Invalid YAML: {exc}") from exc

    if not isinstance(parsed, dict):
        raise click.ClickException("Configuration file must contain a top-level mapping.")

    try:
        resolve_with_precedence(defaults=FileWardenConfig(), file_overrides=parsed)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    manager.save(parsed)
    console.print("[green]Configuration updated successfully.[/green]")


def main() -> None:
    """Invoke the Click CLI as the console script entry point.

    Returns:
        None: This function is invoked for its side effects.
    """
    cli()


if __name__ == "__main__":
    main()
