"""Describe command -- print the CLI description completions are built from."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from shedgen.commands.run import description_factory
from shedgen.output import OutputFormat, error, get_output, print_json, print_table


def describe_command(
    description: Optional[Path] = typer.Option(
        None, "--description", help="JSON/YAML CLI description to use instead of shed's."
    ),
) -> None:
    """Show every command with its flags and subcommands.

    Prints a table, or the full description tree with ``--json`` (the same
    format ``--description`` accepts).

    Example::

        shedgen describe
        shedgen --json describe > shed-cli.json
    """
    from shedgen.completion.base import command_flags, flag_words, subcommand_words
    from shedgen.exceptions import ShedgenError

    try:
        cli = description_factory(description)()
    except ShedgenError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    if get_output().format == OutputFormat.JSON:
        print_json(cli.model_dump(mode="json", exclude_defaults=True))
        return

    rows = [
        [
            " ".join(path),
            " ".join(flag_words(command_flags(cli, node))),
            " ".join(subcommand_words(node)),
            node.help.splitlines()[0] if node.help else "",
        ]
        for path, node in cli.walk()
    ]
    print_table(["Command", "Flags", "Subcommands", "Help"], rows, title=cli.name)
