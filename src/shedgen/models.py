"""Canonical Pydantic models shared across all shedgen modules.

This is the single source of truth for data shapes in the project. The
models fall into three groups:

**CLI description models** -- an immutable tree describing a command-line
surface, produced by :func:`~shedgen.cli.build_cli` (or loaded from a file)
and consumed by the completion renderers and the click command builder:
    :class:`ValueHint`, :class:`FlagSpec`, :class:`ArgSpec`,
    :class:`CommandSpec`, and :class:`CliDescription`.

**Build artifacts** -- values produced by one build invocation:
    :class:`ShellDialect`, :class:`VersionKey`,
    :class:`CompletionArtifact`, and :class:`BuildReport`.

**Configuration** -- :class:`BuildEnvironment`, resolved by
:func:`~shedgen.config.load_build_environment`.

Description models are permissive: structural problems such as
duplicate short flags are reported by
:func:`~shedgen.completion.validate_description` as
:class:`~shedgen.exceptions.InvalidDescriptionError`, not as Pydantic
validation errors.
"""

from __future__ import annotations

import enum
from pathlib import Path
from typing import Iterator, Optional

from pydantic import BaseModel, ConfigDict, Field


# --- CLI description ---


class ValueHint(str, enum.Enum):
    """What kind of value a flag or positional argument accepts."""

    ANY = "any"
    FILE = "file"
    DIR = "dir"
    HOSTNAME = "hostname"


class FlagSpec(BaseModel):
    """A ``--long`` / ``-s`` flag declared on one command.

    Example::

        FlagSpec(name="config", short="c", takes_value=True,
                 value_name="FILE", value_hint=ValueHint.FILE,
                 help="Path to the config file")
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Long flag name without the leading dashes")
    short: Optional[str] = Field(
        default=None, description="Single-character short form"
    )
    takes_value: bool = Field(
        default=False, description="Whether the flag consumes the next token"
    )
    value_name: Optional[str] = None
    choices: tuple[str, ...] = ()
    value_hint: ValueHint = ValueHint.ANY
    multiple: bool = Field(default=False, description="Flag may be repeated")
    help: str = ""

    @property
    def long_form(self) -> str:
        return f"--{self.name}"

    @property
    def short_form(self) -> Optional[str]:
        return f"-{self.short}" if self.short else None

    @property
    def forms(self) -> tuple[str, ...]:
        """All spellings of the flag, short form first."""
        if self.short_form:
            return (self.short_form, self.long_form)
        return (self.long_form,)

    @property
    def metavar(self) -> str:
        return self.value_name or self.name.upper().replace("-", "_")


class ArgSpec(BaseModel):
    """A positional argument of a command."""

    model_config = ConfigDict(frozen=True)

    name: str
    help: str = ""
    required: bool = False
    choices: tuple[str, ...] = ()
    value_hint: ValueHint = ValueHint.ANY


class CommandSpec(BaseModel):
    """One node of the command tree.

    Subcommands keep their declaration order; renderers emit them in that
    order so output is deterministic.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    help: str = ""
    aliases: tuple[str, ...] = ()
    flags: tuple[FlagSpec, ...] = ()
    args: tuple[ArgSpec, ...] = ()
    subcommands: tuple[CommandSpec, ...] = ()

    def walk(
        self, parent: tuple[str, ...] = ()
    ) -> Iterator[tuple[tuple[str, ...], CommandSpec]]:
        """Yield ``(path, node)`` pairs depth-first, this node first.

        ``path`` includes this node's own name, so for the root of a
        :class:`CliDescription` every path starts with the program name.
        """
        path = parent + (self.name,)
        yield path, self
        for sub in self.subcommands:
            yield from sub.walk(path)

    def find(self, path: tuple[str, ...] | list[str]) -> Optional[CommandSpec]:
        """Return the descendant reached by following *path* (names or aliases)."""
        node: CommandSpec = self
        for part in path:
            match = next(
                (s for s in node.subcommands if part == s.name or part in s.aliases),
                None,
            )
            if match is None:
                return None
            node = match
        return node


class CliDescription(CommandSpec):
    """Root of a command tree. ``name`` is the program name.

    When ``version`` is set, renderers add the implicit ``-V/--version``
    flag to the root command.
    """

    version: Optional[str] = None


# --- Build artifacts ---


class ShellDialect(str, enum.Enum):
    """Shell dialects supported by the completion emitter."""

    BASH = "bash"
    ZSH = "zsh"
    POWERSHELL = "powershell"

    def file_name(self, program_name: str) -> str:
        """Return the conventional completion file name for *program_name*."""
        if self is ShellDialect.BASH:
            return f"{program_name}.bash"
        if self is ShellDialect.ZSH:
            return f"_{program_name}"
        return f"_{program_name}.ps1"

    @classmethod
    def ordered(cls) -> tuple[ShellDialect, ...]:
        """The fixed order in which a release build emits completions."""
        return (cls.BASH, cls.ZSH, cls.POWERSHELL)


class VersionKey(BaseModel):
    """The resolved ``DEMON_VERSION`` value and the parts it was built from.

    Example::

        >>> VersionKey(declared_version="1.2.3", revision="abc123d", dirty=False).value
        '1.2.3-abc123d'
    """

    model_config = ConfigDict(frozen=True)

    declared_version: str
    revision: Optional[str] = None
    dirty: Optional[bool] = Field(
        default=None, description="None when cleanliness could not be determined"
    )
    vcs: Optional[str] = Field(default=None, description="'git', 'hg' or None")

    @property
    def value(self) -> str:
        if self.revision is None:
            return self.declared_version
        value = f"{self.declared_version}-{self.revision}"
        if self.dirty:
            value += "-dirty"
        return value

    def __str__(self) -> str:
        return self.value


class CompletionArtifact(BaseModel):
    """One completion script written by the emitter."""

    model_config = ConfigDict(frozen=True)

    dialect: ShellDialect
    path: Path
    size: int


class BuildReport(BaseModel):
    """Everything one orchestrator run produced."""

    model_config = ConfigDict(frozen=True)

    version: VersionKey
    profile: str
    artifacts: tuple[CompletionArtifact, ...] = ()
    directives: tuple[str, ...] = ()

    @property
    def is_release(self) -> bool:
        return self.profile == "release"


# --- Configuration ---


class BuildEnvironment(BaseModel):
    """Inputs of one build invocation.

    Fields that are ``None`` were not supplied by a CLI flag or environment
    variable; the orchestrator decides which of them are required.
    """

    declared_version: Optional[str] = Field(
        default=None, description="Declared package version (PKG_VERSION)"
    )
    profile: Optional[str] = Field(default=None, description="Build profile (PROFILE)")
    out_dir: Optional[Path] = Field(default=None, description="Build output dir (OUT_DIR)")
    manifest_dir: Path = Field(default_factory=Path.cwd)
    trigger_file: Path = Path("build.py")
    program_name: str = "shed"


CommandSpec.model_rebuild()
CliDescription.model_rebuild()
