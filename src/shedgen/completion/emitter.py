"""Completion emitter -- render one dialect and write it to the output directory."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

from shedgen.completion.base import validate_description
from shedgen.completion.bash import render_bash
from shedgen.completion.powershell import render_powershell
from shedgen.completion.zsh import render_zsh
from shedgen.exceptions import EmitIoError, InvalidUsageError
from shedgen.fileio import atomic_write
from shedgen.models import CliDescription, CompletionArtifact, ShellDialect
from shedgen.output import debug

Renderer = Callable[[CliDescription, str], str]

RENDERERS: dict[ShellDialect, Renderer] = {
    ShellDialect.BASH: render_bash,
    ShellDialect.ZSH: render_zsh,
    ShellDialect.POWERSHELL: render_powershell,
}


def parse_dialect(name: str) -> ShellDialect:
    """Map a user-supplied shell name to a :class:`~shedgen.models.ShellDialect`.

    Raises:
        InvalidUsageError: If *name* is not a supported shell.
    """
    normalised = name.strip().lower()
    if normalised in ("pwsh", "ps"):
        normalised = ShellDialect.POWERSHELL.value
    try:
        return ShellDialect(normalised)
    except ValueError:
        supported = ", ".join(d.value for d in ShellDialect.ordered())
        raise InvalidUsageError(f"Unsupported shell: {name}. Supported: {supported}") from None


def render(dialect: ShellDialect, cli: CliDescription, program_name: str) -> str:
    """Render the completion script for *dialect* without touching the filesystem.

    Pure: identical inputs always produce identical text.

    Raises:
        InvalidDescriptionError: If *cli* is malformed.
    """
    validate_description(cli, program_name)
    return RENDERERS[dialect](cli, program_name)


def emit_artifact(
    dialect: ShellDialect,
    cli: CliDescription,
    program_name: str,
    out_dir: Path,
) -> CompletionArtifact:
    """Render *dialect* and write it into *out_dir*.

    Returns:
        The written :class:`~shedgen.models.CompletionArtifact`.

    Raises:
        InvalidDescriptionError: If *cli* is malformed (nothing is written).
        EmitIoError: If *out_dir* is missing or the file cannot be written.
    """
    script = render(dialect, cli, program_name)
    out_dir = Path(out_dir)
    if not out_dir.is_dir():
        raise EmitIoError(f"Output directory does not exist: {out_dir}")

    path = out_dir / dialect.file_name(program_name)
    try:
        atomic_write(path, script)
    except OSError as exc:
        raise EmitIoError(f"Failed to write {dialect.value} completions to {path}: {exc}") from exc

    size = len(script.encode("utf-8"))
    debug(f"Wrote {dialect.value} completions to {path} ({size} bytes)")
    return CompletionArtifact(dialect=dialect, path=path, size=size)


def emit(
    dialect: ShellDialect,
    cli: CliDescription,
    program_name: str,
    out_dir: Path,
) -> Path:
    """Write the *dialect* completion script for *cli* into *out_dir*.

    Re-running with the same inputs overwrites the file with byte-identical
    content.

    Returns:
        Path of the written file, named per the dialect's convention.

    Raises:
        InvalidDescriptionError: If *cli* is malformed (nothing is written).
        EmitIoError: If the file cannot be created or written.
    """
    return emit_artifact(dialect, cli, program_name, out_dir).path
