"""main.py – CLI entry point for ccreg.

Every command resolves a fresh registry from the nearest ``ccreg.toml``, the
``CCREG_FLAGS`` environment variable, and any compiler flags given after the
command, then reports on it.
"""

from pathlib import Path

import typer
from rich.table import Table
from rich.text import Text

from ccreg.cli import (
    FLAG_CONTEXT,
    FileOption,
    JsonOption,
    NoEnvOption,
    console,
    error_exit,
    json_print,
    resolve_registry,
)
from ccreg.config import dump_toml
from ccreg.options import (
    OPTION_SPECS,
    OptionCategory,
    OptionKind,
    OptionSpec,
    lookup_kind,
    render_value,
)


def _flag_display(spec: OptionSpec) -> str:
    if spec.kind is OptionKind.OPT_LEVEL:
        return "-O<n>"
    return f"--{spec.flag}"


app = typer.Typer(
    help="Inspect the resolved compiler configuration.",
    rich_markup_mode="rich",
    no_args_is_help=True,
    epilog="""\
[bold]Examples:[/bold]
  ccreg show -O3 --mcpu=z16            Resolve flags and print every option
  ccreg show --json --maccel=NNPA      Same, as JSON
  ccreg show --toml > ccreg.toml       Save the non-default options
  ccreg get OptLevel -O2               Print one option's canonical value
  ccreg options --category common      List the option catalog

[dim]Flags are read from ccreg.toml, then $CCREG_FLAGS, then the command line.[/dim]""",
)


@app.command(context_settings=FLAG_CONTEXT)
def show(
    ctx: typer.Context,
    file: Path | None = FileOption,
    no_env: bool = NoEnvOption,
    json_output: bool = JsonOption,
    toml_output: bool = typer.Option(False, "--toml", help="Emit an option file."),
) -> None:
    """Print every option and the auxiliary config map."""
    registry = resolve_registry(ctx.args, file=file, use_env=not no_env, json_mode=json_output)

    if json_output:
        json_print(
            {
                "options": registry.snapshot(),
                "config": registry.compiler_config.as_dict(),
            }
        )
        return
    if toml_output:
        typer.echo(dump_toml(registry), nl=False)
        return

    table = Table(title="Compiler options")
    table.add_column("Option")
    table.add_column("Flag", style="cyan")
    table.add_column("Value")
    for spec in OPTION_SPECS:
        value = registry.get_compiler_option(spec.kind)
        style = "bold" if registry.is_set(spec.kind) else "dim"
        table.add_row(spec.name, _flag_display(spec), Text(value or '""', style=style))
    console.print(table)

    entries = registry.compiler_config.as_dict()
    if entries:
        config = Table(title="Config map")
        config.add_column("Key")
        config.add_column("Values")
        for key, values in entries.items():
            config.add_row(key, ", ".join(values))
        console.print(config)


@app.command(context_settings=FLAG_CONTEXT)
def get(
    ctx: typer.Context,
    kind: str = typer.Argument(..., help="Option name (TargetCPU) or flag name (mcpu)."),
    file: Path | None = FileOption,
    no_env: bool = NoEnvOption,
    json_output: bool = JsonOption,
) -> None:
    """Print one option's canonical value."""
    resolved = lookup_kind(kind)
    if resolved is None:
        error_exit(f"unknown option {kind!r}", json_mode=json_output)
    registry = resolve_registry(ctx.args, file=file, use_env=not no_env, json_mode=json_output)
    value = registry.get_compiler_option(resolved)
    if json_output:
        json_print({"option": resolved.value, "value": value})
    else:
        typer.echo(value)


@app.command(context_settings=FLAG_CONTEXT)
def config(
    ctx: typer.Context,
    key: str = typer.Argument(..., help="Config map key, e.g. sharedLibDeps."),
    file: Path | None = FileOption,
    no_env: bool = NoEnvOption,
    json_output: bool = JsonOption,
) -> None:
    """Print the auxiliary config values stored under KEY."""
    registry = resolve_registry(ctx.args, file=file, use_env=not no_env, json_mode=json_output)
    values = registry.get_compiler_config(key)
    if json_output:
        json_print({"key": key, "values": values})
    else:
        for value in values:
            typer.echo(value)


@app.command()
def options(
    category: OptionCategory | None = typer.Option(
        None, "--category", help="Only list options in this category."
    ),
    json_output: bool = JsonOption,
) -> None:
    """List the option catalog."""
    specs = [s for s in OPTION_SPECS if category is None or s.category is category]
    if json_output:
        json_print(
            [
                {
                    "option": s.name,
                    "flag": s.flag,
                    "type": s.value_kind.value,
                    "default": render_value(s, s.default),
                    "category": s.category.value,
                    "help": s.help,
                }
                for s in specs
            ]
        )
        return
    table = Table(title="Option catalog")
    table.add_column("Option")
    table.add_column("Flag", style="cyan")
    table.add_column("Type")
    table.add_column("Default")
    table.add_column("Help", style="dim")
    for s in specs:
        table.add_row(
            s.name, _flag_display(s), s.value_kind.value, render_value(s, s.default), s.help
        )
    console.print(table)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
