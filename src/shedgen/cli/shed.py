"""The ``shed`` command-line surface.

:func:`build_cli` is the single definition of the flags and commands the
``shed`` binary accepts. It is consumed twice: by the completion emitter at
build time and by :func:`~shedgen.cli.command_tree.build_command` when a
runtime argument parser is needed. Neither consumer depends on what the
commands actually do.
"""

from __future__ import annotations

from shedgen.models import ArgSpec, CliDescription, CommandSpec, FlagSpec, ValueHint

PROGRAM_NAME = "shed"

_PACK_FORMATS = ("tar", "tar.gz", "tar.zst", "zip")


def _config_flag() -> FlagSpec:
    return FlagSpec(
        name="config",
        short="c",
        takes_value=True,
        value_name="FILE",
        value_hint=ValueHint.FILE,
        help="Use the given config file",
    )


def build_cli() -> CliDescription:
    """Return the ``shed`` command tree.

    Pure and deterministic: every call returns an equal, immutable tree.
    """
    return CliDescription(
        name=PROGRAM_NAME,
        help="shed -- a local development shed for packages, stores and servers",
        flags=(
            _config_flag(),
            FlagSpec(name="verbose", short="v", multiple=True, help="Increase log verbosity"),
            FlagSpec(name="quiet", short="q", help="Only print errors"),
        ),
        subcommands=(
            CommandSpec(
                name="status",
                aliases=("st",),
                help="Show the state of the shed and its registries",
                flags=(
                    FlagSpec(name="remote", short="r", help="Include remote registries"),
                    FlagSpec(name="json", help="Print machine-readable output"),
                ),
            ),
            CommandSpec(
                name="serve",
                help="Run the shed server",
                flags=(
                    FlagSpec(
                        name="addr",
                        short="a",
                        takes_value=True,
                        value_name="HOST",
                        value_hint=ValueHint.HOSTNAME,
                        help="Address to bind",
                    ),
                    FlagSpec(
                        name="port",
                        short="p",
                        takes_value=True,
                        value_name="PORT",
                        help="Port to listen on",
                    ),
                    FlagSpec(
                        name="engine",
                        short="e",
                        takes_value=True,
                        choices=("http", "udp", "dns"),
                        help="Network engine",
                    ),
                ),
            ),
            CommandSpec(
                name="pull",
                help="Fetch packages from a remote registry",
                flags=(
                    FlagSpec(
                        name="remote",
                        short="r",
                        takes_value=True,
                        value_name="URL",
                        help="Registry to pull from",
                    ),
                    FlagSpec(name="all", help="Pull every tracked package"),
                ),
                args=(ArgSpec(name="package", help="Package to pull"),),
            ),
            CommandSpec(
                name="push",
                help="Publish packages to a remote registry",
                flags=(
                    FlagSpec(
                        name="remote",
                        short="r",
                        takes_value=True,
                        value_name="URL",
                        help="Registry to push to",
                    ),
                    FlagSpec(name="force", short="f", help="Overwrite existing versions"),
                ),
                args=(ArgSpec(name="package", help="Package to push", required=True),),
            ),
            CommandSpec(
                name="pack",
                help="Pack a directory into an archive",
                flags=(
                    FlagSpec(
                        name="output",
                        short="o",
                        takes_value=True,
                        value_name="FILE",
                        value_hint=ValueHint.FILE,
                        help="Archive to write",
                    ),
                    FlagSpec(
                        name="format",
                        short="f",
                        takes_value=True,
                        choices=_PACK_FORMATS,
                        help="Archive format",
                    ),
                ),
                args=(
                    ArgSpec(
                        name="input",
                        help="Directory to pack",
                        required=True,
                        value_hint=ValueHint.DIR,
                    ),
                ),
            ),
            CommandSpec(
                name="unpack",
                help="Unpack an archive",
                flags=(
                    FlagSpec(
                        name="output",
                        short="o",
                        takes_value=True,
                        value_name="DIR",
                        value_hint=ValueHint.DIR,
                        help="Directory to unpack into",
                    ),
                    FlagSpec(name="replace", help="Replace existing files"),
                ),
                args=(
                    ArgSpec(
                        name="input",
                        help="Archive to unpack",
                        required=True,
                        value_hint=ValueHint.FILE,
                    ),
                ),
            ),
            CommandSpec(
                name="store",
                help="Manage the local package store",
                subcommands=(
                    CommandSpec(
                        name="list",
                        aliases=("ls",),
                        help="List stored packages",
                        flags=(FlagSpec(name="long", short="l", help="Show sizes and dates"),),
                    ),
                    CommandSpec(
                        name="gc",
                        help="Remove unreferenced objects",
                        flags=(
                            FlagSpec(name="dry-run", short="n", help="Only report what would be removed"),
                        ),
                    ),
                ),
            ),
        ),
    )
