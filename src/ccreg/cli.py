"""Shared CLI utilities for ccreg commands.

Provides the common Typer options, registry resolution, and standardised
output / error helpers so that every command resolves options the same way
(option file, then ``CCREG_FLAGS``, then command-line flags).

Usage in a command::

    @app.command(context_settings=FLAG_CONTEXT)
    def show(ctx: typer.Context, file: Path | None = FileOption, no_env: bool = NoEnvOption):
        reg = resolve_registry(ctx.args, file=file, use_env=not no_env)
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path
from typing import Any, NoReturn

import typer
from rich.console import Console

from ccreg.config import apply_options_file, find_options_file
from ccreg.flags import FlagError, apply_flags
from ccreg.registry import CompilerRegistry, Status

# Compiler flags are passed through as extra arguments.
FLAG_CONTEXT: dict[str, Any] = {"allow_extra_args": True, "ignore_unknown_options": True}

FileOption: Path | None = typer.Option(
    None,
    "--file",
    help="Option file to load first (default: nearest ccreg.toml).",
)

NoEnvOption: bool = typer.Option(
    False,
    "--no-env",
    help="Ignore the CCREG_FLAGS environment variable.",
)

JsonOption: bool = typer.Option(False, "--json", help="Emit machine-readable JSON.")


# ---------------------------------------------------------------------------
# Standardised output helpers
# ---------------------------------------------------------------------------

console = Console()
_err_console = Console(stderr=True)


def error_exit(msg: str, *, json_mode: bool = False, code: int = 1) -> NoReturn:
    """Print *msg* as an error and ``raise typer.Exit(code)``."""
    if json_mode:
        print(json.dumps({"error": msg}, indent=2))
    else:
        _err_console.print(f"[red bold]error:[/red bold] {msg}", markup=True, highlight=False)
    raise typer.Exit(code=code)


def json_print(data: dict[str, Any] | list[Any]) -> None:
    """Print *data* as pretty-printed JSON to stdout."""
    print(json.dumps(data, indent=2))


def check_status(status: Status, what: str, *, json_mode: bool = False) -> None:
    """Exit with the status value as exit code unless *status* is OK."""
    if status != Status.OK:
        error_exit(
            f"{what}: {status.name.lower().replace('_', ' ')}",
            json_mode=json_mode,
            code=int(status),
        )


def resolve_registry(
    argv: Sequence[str],
    *,
    file: Path | None = None,
    use_env: bool = True,
    json_mode: bool = False,
) -> CompilerRegistry:
    """Build a registry from option file, environment and *argv*, exiting on error."""
    registry = CompilerRegistry()
    path = file if file is not None else find_options_file()
    if path is not None:
        try:
            status = apply_options_file(registry, path)
        except (OSError, KeyError, ValueError) as exc:
            error_exit(f"{path}: {exc}", json_mode=json_mode)
        check_status(status, str(path), json_mode=json_mode)
    try:
        status = apply_flags(registry, argv, use_env=use_env)
    except FlagError as exc:
        error_exit(str(exc), json_mode=json_mode)
    check_status(status, "invalid compiler flags", json_mode=json_mode)
    return registry
