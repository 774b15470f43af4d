"""Version command -- print the resolved ``DEMON_VERSION``."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from shedgen.exit_codes import EXIT_GENERIC_FAILURE
from shedgen.output import OutputFormat, error, get_output, print_data, print_json, success


def version_command(
    declared_version: Optional[str] = typer.Option(
        None, "--declared-version", help="Declared package version [env: PKG_VERSION]."
    ),
    manifest_dir: Optional[str] = typer.Option(
        None, "--manifest-dir", help="Directory to resolve the revision from [env: MANIFEST_DIR]."
    ),
    write_module: Optional[Path] = typer.Option(
        None, "--write-module", help="Also write a Python module defining DEMON_VERSION."
    ),
) -> None:
    """Print the version key the next build would embed.

    Example::

        shedgen version --declared-version 1.2.3
        shedgen version --write-module src/shed/_version.py
    """
    from shedgen.config import load_build_environment
    from shedgen.exceptions import VersionResolutionError
    from shedgen.version import require_declared_version, resolve_version, write_version_module

    env = load_build_environment(declared_version=declared_version, manifest_dir=manifest_dir)
    try:
        declared = require_declared_version(env.declared_version)
    except VersionResolutionError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    key = resolve_version(declared, env.manifest_dir)

    if write_module is not None:
        try:
            path = write_version_module(key, write_module)
        except OSError as exc:
            error(f"Failed to write {write_module}: {exc}")
            raise typer.Exit(code=EXIT_GENERIC_FAILURE) from None
        success(f"Wrote {path}")

    if get_output().format == OutputFormat.JSON:
        data = key.model_dump(mode="json")
        data["value"] = key.value
        print_json(data)
    else:
        print_data(key.value)
