"""Typer application factory and CLI entry point for shedgen.

This module wires together the top-level Typer application and registers
the built-in sub-commands (``run``, ``version``, ``completions``,
``describe``).

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs signal handlers and invokes the Typer app.
:class:`~shedgen.exceptions.ShedgenError` instances that escape a command
exit with the error's code; anything else is reported as a crash with
:data:`~shedgen.exit_codes.EXIT_GENERIC_FAILURE`.

See Also:
    :mod:`shedgen.orchestrator`: The build driver behind ``shedgen run``.
    :mod:`shedgen.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import signal
import sys
import traceback
from typing import Any

import typer

from shedgen import __version__
from shedgen.commands.completions import completions_app
from shedgen.commands.describe import describe_command
from shedgen.commands.run import run_command
from shedgen.commands.version import version_command
from shedgen.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="shedgen",
    help="Generate build-time version keys and shell completions for shed.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command("run")(run_command)
app.command("version")(version_command)
app.command("describe")(describe_command)
app.add_typer(completions_app, name="completions", help="Render shell completion scripts.")


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"shedgen {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(
        False, "--json", help="JSON output format."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Initialises the global :class:`~shedgen.output.OutputManager` from
    CLI flags. Build systems usually run shedgen non-interactively, so the
    manager falls back to plain output whenever stdout is not a TTY.
    """
    from shedgen.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.JSON if json_output else OutputFormat.AUTO
    set_output(
        OutputManager(
            format=fmt,
            no_color=no_color,
            quiet=quiet,
            verbose=verbose,
        )
    )

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def main() -> None:
    """CLI entry point invoked by the ``shedgen`` console script.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from shedgen.exceptions import ShedgenError
        from shedgen.output import debug, error

        if isinstance(exc, ShedgenError):
            error(str(exc))
            sys.exit(exc.exit_code)
        error(f"Unexpected error: {exc}")
        debug(traceback.format_exc())
        sys.exit(EXIT_GENERIC_FAILURE)


if __name__ == "__main__":
    main()
