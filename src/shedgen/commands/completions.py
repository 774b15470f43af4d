"""Completions commands -- render or write completion scripts on demand.

This module implements the ``shedgen completions`` command group with two
sub-commands:

* ``completions show`` -- Print one dialect's completion script to stdout
  for inspection or piping to a file.
* ``completions write`` -- Write one dialect (or all three) into a
  directory, outside the release-build flow of ``shedgen run``.

Supported shells: bash, zsh, PowerShell (``pwsh`` is accepted as an alias).
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from shedgen.commands.run import description_factory
from shedgen.exit_codes import EXIT_GENERIC_FAILURE
from shedgen.output import error, print_data, success

completions_app = typer.Typer(no_args_is_help=True)
"""Typer application for the ``completions`` command group."""

_PROGRAM_HELP = "Program name the script completes (default: the description's name)."
_DESCRIPTION_HELP = "JSON/YAML CLI description to use instead of shed's."


@completions_app.command("show")
def completions_show(
    shell: str = typer.Argument(
        "bash",
        help="Shell to show completion for (bash, zsh, powershell).",
    ),
    program_name: Optional[str] = typer.Option(None, "--program-name", help=_PROGRAM_HELP),
    description: Optional[Path] = typer.Option(None, "--description", help=_DESCRIPTION_HELP),
) -> None:
    """Print the completion script for a shell to stdout.

    Example:
        ::

            shedgen completions show zsh > ~/.zfunc/_shed
    """
    from shedgen.completion import parse_dialect, render
    from shedgen.exceptions import ShedgenError

    try:
        dialect = parse_dialect(shell)
        cli = description_factory(description)()
        script = render(dialect, cli, program_name or cli.name)
    except ShedgenError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    print_data(script.rstrip("\n"))


@completions_app.command("write")
def completions_write(
    shell: Optional[str] = typer.Argument(
        None,
        help="Shell to write completion for (bash, zsh, powershell). All three if omitted.",
    ),
    out_dir: Path = typer.Option(..., "--out-dir", "-o", help="Directory to write into."),
    program_name: Optional[str] = typer.Option(None, "--program-name", help=_PROGRAM_HELP),
    description: Optional[Path] = typer.Option(None, "--description", help=_DESCRIPTION_HELP),
) -> None:
    """Write completion scripts into a directory, creating it if needed.

    Example:
        ::

            shedgen completions write --out-dir dist/completions
            shedgen completions write zsh -o ~/.zfunc
    """
    from shedgen.completion import emit, parse_dialect
    from shedgen.exceptions import ShedgenError
    from shedgen.models import ShellDialect

    try:
        dialects = [parse_dialect(shell)] if shell else list(ShellDialect.ordered())
        cli = description_factory(description)()
    except ShedgenError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    try:
        out_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        error(f"Cannot create {out_dir}: {exc}")
        raise typer.Exit(code=EXIT_GENERIC_FAILURE) from None

    for dialect in dialects:
        try:
            path = emit(dialect, cli, program_name or cli.name, out_dir)
        except ShedgenError as exc:
            error(str(exc))
            raise typer.Exit(code=exc.exit_code) from None
        success(f"{dialect.value} completion written to {path}")
