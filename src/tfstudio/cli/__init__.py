"""tfstudio command line: the app, global options and logging setup."""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated

import typer

from tfstudio import __version__

app = typer.Typer(
    name="tfstudio",
    help="Generate Terraform from infrastructure diagrams.",
    no_args_is_help=True,
    add_completion=False,
)

LOG_ENV_VAR = "TFSTUDIO_LOG"
_LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"
# Indexed by the number of -v flags.
_VERBOSITY_LEVELS = (logging.WARNING, logging.INFO, logging.DEBUG)


@dataclass
class CliState:
    """Options given before the command name; command options override them."""

    config: Path | None = None
    no_color: bool = False


def log_level(verbose: int) -> int | None:
    """Level for the ``tfstudio`` loggers, or None to leave logging untouched.

    A level name in ``TFSTUDIO_LOG`` wins over ``-v`` flags; an unknown name
    falls back to INFO with a notice on stderr.
    """
    name = os.environ.get(LOG_ENV_VAR, "").strip().upper()
    if name:
        level = logging.getLevelNamesMapping().get(name)
        if level is None:
            typer.echo(f"Ignoring unknown {LOG_ENV_VAR} level '{name}'; using INFO", err=True)
            return logging.INFO
        return level
    if verbose <= 0:
        return None
    return _VERBOSITY_LEVELS[min(verbose, len(_VERBOSITY_LEVELS) - 1)]


def _configure_logging(verbose: int) -> None:
    level = log_level(verbose)
    if level is None:
        return
    logging.basicConfig(level=logging.WARNING, format=_LOG_FORMAT, stream=sys.stderr, force=True)
    logging.getLogger("tfstudio").setLevel(level)


def _print_version(value: bool) -> None:
    if value:
        typer.echo(f"tfstudio {__version__}")
        raise typer.Exit


@app.callback()
def main(
    ctx: typer.Context,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Project file for every command (default: $TFSTUDIO_CONFIG or tfstudio.yaml).",
        ),
    ] = None,
    no_color: Annotated[bool, typer.Option("--no-color", help="Disable colored output.")] = False,
    verbose: Annotated[
        int,
        typer.Option("--verbose", "-v", count=True, help="-v for info logs, -vv for debug."),
    ] = 0,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=_print_version,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Generate Terraform from infrastructure diagrams."""
    _ = version
    _configure_logging(verbose)
    ctx.obj = CliState(config=config, no_color=no_color)


# Commands import ``app`` from this module.
from tfstudio.cli import commands as _commands  # noqa: E402, F401
