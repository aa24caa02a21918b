"""CLI command implementations."""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer

from tfstudio.cli import CliState, app
from tfstudio.cli.errors import handle_error

if TYPE_CHECKING:
    from collections.abc import Iterable

    from tfstudio.config.schema import Document
    from tfstudio.engine.registry import PluginRegistry

ConfigPath = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="Project file; overrides the global --config.",
    ),
]

NoColor = Annotated[
    bool,
    typer.Option("--no-color", help="Disable colored output."),
]

cidr_app = typer.Typer(name="cidr", help="CIDR helpers.", no_args_is_help=True)
app.add_typer(cidr_app, name="cidr")


def _state(ctx: typer.Context) -> CliState:
    return ctx.ensure_object(CliState)


def _use_color(ctx: typer.Context, no_color: bool) -> bool:
    """Color unless --no-color (global or per command) or $NO_COLOR is set."""
    return not (no_color or _state(ctx).no_color or os.environ.get("NO_COLOR"))


def _config_path(ctx: typer.Context, config: Path | None) -> Path:
    """Command option, then the global option, then settings."""
    from tfstudio.config.schema import Settings

    return config or _state(ctx).config or Settings().config


def _load_registry(
    document: Document, *, color: bool, providers: Iterable[str] | None = None
) -> PluginRegistry:
    """Load provider plugins behind a Rich status spinner."""
    from rich.console import Console

    from tfstudio.config import build_registry

    console = Console(stderr=True, no_color=not color)
    with console.status("Loading provider plugins..."):
        return build_registry(document, providers)


@app.command()
def validate(
    ctx: typer.Context,
    config: ConfigPath = None,
    no_color: NoColor = False,
) -> None:
    """Validate the diagram and its network topology."""
    from tfstudio.cli.formatting import format_issue_summary, format_issues, issue_counts, styler
    from tfstudio.config import load
    from tfstudio.config import validate as validate_fn

    color = _use_color(ctx, no_color)
    try:
        document = load(_config_path(ctx, config))
        registry = _load_registry(document, color=color)
        diagram, topology = validate_fn(document, registry)
    except Exception as exc:
        raise typer.Exit(handle_error(exc, color=color)) from exc

    counts = issue_counts(diagram, topology)
    if counts["error"] or counts["warning"]:
        typer.echo(format_issues(diagram, topology, color=color))
        typer.echo()
        typer.echo(format_issue_summary(counts, color=color))
    if counts["error"]:
        raise typer.Exit(1)

    typer.echo(styler(color)("Diagram is valid.", fg="green"))


@app.command()
def generate(
    ctx: typer.Context,
    config: ConfigPath = None,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Directory to write Terraform files to."),
    ] = None,
    force: Annotated[
        bool,
        typer.Option("--force", help="Generate even when validation reports warnings."),
    ] = False,
    no_color: NoColor = False,
) -> None:
    """Validate the diagram and write Terraform files."""
    from tfstudio.cli.formatting import styler
    from tfstudio.config import generate as generate_fn
    from tfstudio.config import load, write_files
    from tfstudio.config.schema import Settings

    color = _use_color(ctx, no_color)
    try:
        document = load(_config_path(ctx, config))
        registry = _load_registry(document, color=color)
        result = generate_fn(document, registry, allow_warnings=force)

        if output is None:
            output = (
                document.config_dir / document.output_dir
                if document.output_dir is not None
                else Settings().output_dir
            )
        written = write_files(result.files, output)
    except Exception as exc:
        raise typer.Exit(handle_error(exc, color=color)) from exc

    for path in written:
        typer.echo(f"  {path}")
    typer.echo()
    count = len(written)
    typer.echo(
        styler(color)(
            f"Generated {count} file{'s' if count != 1 else ''} in {output}.", fg="green"
        )
    )


@app.command()
def types(
    ctx: typer.Context,
    config: ConfigPath = None,
    no_color: NoColor = False,
) -> None:
    """List the resource types provided by the declared plugins."""
    from tfstudio.cli.formatting import format_types
    from tfstudio.config import load

    color = _use_color(ctx, no_color)
    try:
        document = load(_config_path(ctx, config))
        providers = [*document.plugin_references(), *document.provider_ids()]
        registry = _load_registry(document, color=color, providers=providers)
    except Exception as exc:
        raise typer.Exit(handle_error(exc, color=color)) from exc

    typer.echo(format_types(registry, color=color))


@cidr_app.command(name="next")
def cidr_next(
    parent: Annotated[str, typer.Argument(help="Parent CIDR, e.g. 10.0.0.0/16.")],
    used: Annotated[
        list[str] | None,
        typer.Option("--used", "-u", help="CIDR already in use (repeatable)."),
    ] = None,
    prefix: Annotated[
        int,
        typer.Option("--prefix", "-p", help="Prefix length of the block to allocate."),
    ] = 24,
) -> None:
    """Print the first free block of PARENT not overlapping any --used block."""
    from tfstudio.networking.cidr import is_valid_cidr, next_available_cidr

    if not is_valid_cidr(parent):
        raise typer.Exit(handle_error(ValueError(f"Invalid CIDR: {parent!r}")))
    invalid = [u for u in used or [] if not is_valid_cidr(u)]
    if invalid:
        raise typer.Exit(handle_error(ValueError(f"Invalid CIDR: {invalid[0]!r}")))

    block = next_available_cidr(parent, used or [], prefix)
    if block is None:
        typer.echo(f"No free /{prefix} block left in {parent}.", err=True)
        raise typer.Exit(1)
    typer.echo(block)
