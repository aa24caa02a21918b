"""Map exceptions to clean stderr messages and exit codes."""

from __future__ import annotations

import typer


def _err(msg: str, *, fg: str | None) -> None:
    """Print a styled message to stderr."""
    typer.echo(typer.style(msg, fg=fg), err=True)


def handle_error(exc: Exception, *, color: bool = True) -> int:
    """Print a clean error message to stderr and return an exit code.

    All errors map to exit code 1.  No tracebacks are printed.
    """
    from tfstudio.cli.formatting import format_issues
    from tfstudio.config.loader import ConfigError
    from tfstudio.engine.errors import (
        DiagramValidationError,
        GenerationError,
        PluginLoadError,
        UnknownResourceTypeError,
    )

    fg = typer.colors.RED if color else None

    if isinstance(exc, ConfigError):
        _err(f"Configuration error: {exc}", fg=fg)
    elif isinstance(exc, DiagramValidationError):
        _err(f"{exc}:", fg=fg)
        typer.echo(format_issues(exc.diagram, exc.topology, color=color), err=True)
        if not exc.diagram.errors and not any(t.has_errors for t in exc.topology):
            _err("Only warnings were reported; re-run with --force to generate anyway.", fg=fg)
    elif isinstance(exc, PluginLoadError):
        _err(f"Plugin error: {exc}", fg=fg)
    elif isinstance(exc, UnknownResourceTypeError):
        _err(f"{exc}. Is the provider plugin declared?", fg=fg)
    elif isinstance(exc, GenerationError):
        _err(f"Generation failed: {exc}", fg=fg)
    else:
        _err(f"Error: {exc}", fg=fg)

    return 1
