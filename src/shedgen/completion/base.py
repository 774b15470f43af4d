"""Description validation and helpers shared by the completion renderers.

Every renderer walks the same tree and needs the same answers: which flags
does a command accept (including the implicit ``-h/--help`` and
``-V/--version``), what are its next-token candidates, and is the tree safe
to embed in a shell script at all. Those answers live here so the three
dialects cannot drift apart.
"""

from __future__ import annotations

import re

from shedgen.exceptions import InvalidDescriptionError
from shedgen.models import CliDescription, CommandSpec, FlagSpec

# Names, aliases and choices end up unquoted in case patterns and word
# lists, so they are restricted to characters no shell treats specially.
_TOKEN_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.-]*$")

HELP_FLAG = FlagSpec(name="help", short="h", help="Print help")
VERSION_FLAG = FlagSpec(name="version", short="V", help="Print version")


def is_token(value: str) -> bool:
    return bool(_TOKEN_RE.match(value))


def command_flags(cli: CliDescription, node: CommandSpec) -> tuple[FlagSpec, ...]:
    """Flags accepted by *node*: declared ones first, then the implicit ones."""
    implicit = [HELP_FLAG]
    if node is cli and cli.version:
        implicit.append(VERSION_FLAG)
    return node.flags + tuple(implicit)


def subcommand_words(node: CommandSpec) -> list[str]:
    """Names and aliases of *node*'s children, in declaration order."""
    words: list[str] = []
    for sub in node.subcommands:
        words.append(sub.name)
        words.extend(sub.aliases)
    return words


def flag_words(flags: tuple[FlagSpec, ...]) -> list[str]:
    words: list[str] = []
    for flag in flags:
        words.extend(flag.forms)
    return words


def summary(help_text: str) -> str:
    """First non-empty line of *help_text*, stripped."""
    for line in help_text.splitlines():
        if line.strip():
            return line.strip()
    return ""


def shell_ident(value: str) -> str:
    """Make *value* safe to use inside a shell function name."""
    return value.replace("-", "_").replace(".", "_")


def command_ident(path: tuple[str, ...]) -> str:
    """Identifier the renderers derive from a command path (helper and state names)."""
    return "__".join(shell_ident(part) for part in path)


def validate_description(cli: CliDescription, program_name: str | None = None) -> None:
    """Check that *cli* can be rendered into a correct completion script.

    Raises:
        InvalidDescriptionError: On the first problem found.
    """
    if not isinstance(cli, CommandSpec):
        raise InvalidDescriptionError(f"Expected a CLI description, got {type(cli).__name__}")
    name = program_name if program_name is not None else cli.name
    if not name or not is_token(name):
        raise InvalidDescriptionError(f"Invalid program name {name!r}")

    idents: dict[str, tuple[str, ...]] = {}
    for path, node in cli.walk():
        if not node.name or not is_token(node.name):
            raise InvalidDescriptionError(f"Invalid command name {node.name!r}", path[:-1])
        other = idents.setdefault(command_ident(path), path)
        if other != path:
            raise InvalidDescriptionError(
                f"Commands '{' '.join(other)}' and '{' '.join(path)}' map to the same shell name",
                path[:-1],
            )
        for alias in node.aliases:
            if not is_token(alias):
                raise InvalidDescriptionError(f"Invalid alias {alias!r}", path)
        _validate_flags(command_flags(cli, node), path)
        _validate_args(node, path)
        _validate_children(node, path)


def _validate_flags(flags: tuple[FlagSpec, ...], path: tuple[str, ...]) -> None:
    longs: set[str] = set()
    shorts: set[str] = set()
    for flag in flags:
        if not is_token(flag.name):
            raise InvalidDescriptionError(f"Invalid flag name {flag.name!r}", path)
        if flag.name in longs:
            raise InvalidDescriptionError(f"Duplicate flag --{flag.name}", path)
        longs.add(flag.name)

        if flag.short is not None:
            if len(flag.short) != 1 or not flag.short.isascii() or not flag.short.isalnum():
                raise InvalidDescriptionError(
                    f"Short form of --{flag.name} must be one letter or digit, got {flag.short!r}",
                    path,
                )
            if flag.short in shorts:
                raise InvalidDescriptionError(f"Duplicate short flag -{flag.short}", path)
            shorts.add(flag.short)

        if flag.choices and not flag.takes_value:
            raise InvalidDescriptionError(f"Flag --{flag.name} has choices but takes no value", path)
        for choice in flag.choices:
            if not is_token(choice):
                raise InvalidDescriptionError(f"Invalid choice {choice!r} for --{flag.name}", path)


def _validate_args(node: CommandSpec, path: tuple[str, ...]) -> None:
    seen: set[str] = set()
    for arg in node.args:
        if not is_token(arg.name):
            raise InvalidDescriptionError(f"Invalid argument name {arg.name!r}", path)
        if arg.name in seen:
            raise InvalidDescriptionError(f"Duplicate argument {arg.name!r}", path)
        seen.add(arg.name)
        for choice in arg.choices:
            if not is_token(choice):
                raise InvalidDescriptionError(f"Invalid choice {choice!r} for {arg.name}", path)


def _validate_children(node: CommandSpec, path: tuple[str, ...]) -> None:
    seen: set[str] = set()
    for word in subcommand_words(node):
        if word in seen:
            raise InvalidDescriptionError(f"Duplicate subcommand name {word!r}", path)
        seen.add(word)
