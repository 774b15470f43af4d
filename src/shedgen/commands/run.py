"""Run command -- execute the build orchestrator from the build environment.

This is what a build step calls::

    PKG_VERSION=1.2.3 PROFILE=release OUT_DIR=target/out shedgen run

Directive lines for the build system go to stdout; everything else goes to
stderr.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional

import typer

from shedgen.models import CliDescription
from shedgen.output import OutputFormat, error, get_output, print_data, print_json, success


def description_factory(description: Optional[Path]) -> Callable[[], CliDescription]:
    """Return the CLI description constructor selected by ``--description``."""
    from shedgen.cli import build_cli, load_description

    if description is None:
        return build_cli
    return lambda: load_description(description)


def run_command(
    declared_version: Optional[str] = typer.Option(
        None, "--declared-version", help="Declared package version [env: PKG_VERSION]."
    ),
    profile: Optional[str] = typer.Option(
        None, "--profile", help="Build profile [env: PROFILE]."
    ),
    out_dir: Optional[str] = typer.Option(
        None, "--out-dir", help="Build output directory [env: OUT_DIR]."
    ),
    manifest_dir: Optional[str] = typer.Option(
        None, "--manifest-dir", help="Directory to resolve the revision from [env: MANIFEST_DIR]."
    ),
    trigger: Optional[str] = typer.Option(
        None, "--trigger", help="File whose changes re-run the generator [env: SHEDGEN_TRIGGER]."
    ),
    program_name: Optional[str] = typer.Option(
        None, "--program-name", help="Program the completions are for [env: SHEDGEN_PROGRAM]."
    ),
    description: Optional[Path] = typer.Option(
        None, "--description", help="JSON/YAML CLI description to use instead of shed's."
    ),
) -> None:
    """Resolve DEMON_VERSION and, for release builds, generate completions.

    Flags override the corresponding environment variables.

    Raises:
        typer.Exit: With the error's exit code when a required input is
            missing or a completion script cannot be written.

    Example::

        shedgen run --profile release --out-dir target/out
        shedgen --json run
    """
    from shedgen.config import load_build_environment
    from shedgen.exceptions import ShedgenError
    from shedgen.orchestrator import run

    env = load_build_environment(
        declared_version=declared_version,
        profile=profile,
        out_dir=out_dir,
        manifest_dir=manifest_dir,
        trigger_file=trigger,
        program_name=program_name,
    )

    try:
        report = run(env, description_factory(description))
    except ShedgenError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    if get_output().format == OutputFormat.JSON:
        data = report.model_dump(mode="json")
        data["version"]["value"] = report.version.value
        print_json(data)
        return

    for line in report.directives:
        print_data(line)
    for artifact in report.artifacts:
        success(f"{artifact.dialect.value}: {artifact.path}")
