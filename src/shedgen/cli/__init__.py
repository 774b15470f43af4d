"""CLI descriptions -- build, load, and materialise command trees.

Typical usage::

    from shedgen.cli import build_cli, build_command

    cli = build_cli()              # the shed command tree
    parser = build_command(cli)    # a click command for the same tree

Sub-modules:

* :mod:`~shedgen.cli.shed` -- the ``shed`` command tree.
* :mod:`~shedgen.cli.loader` -- load descriptions of other tools from JSON
  or YAML files.
* :mod:`~shedgen.cli.command_tree` -- turn a description into a
  :mod:`click` command tree.
"""

from shedgen.cli.command_tree import build_command
from shedgen.cli.loader import load_description
from shedgen.cli.shed import PROGRAM_NAME, build_cli

__all__ = ["PROGRAM_NAME", "build_cli", "build_command", "load_description"]
