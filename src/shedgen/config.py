"""Build environment resolution with precedence handling.

shedgen is configured by the build system that invokes it, so there is no
config file: every setting comes from a CLI flag, an environment variable,
or a default, in that order of precedence.

======================  ===================  ==================
Setting                 Environment          Default
======================  ===================  ==================
``declared_version``    ``PKG_VERSION``      (none)
``profile``             ``PROFILE``          (none)
``out_dir``             ``OUT_DIR``          (none)
``manifest_dir``        ``MANIFEST_DIR``     current directory
``trigger_file``        ``SHEDGEN_TRIGGER``  ``build.py``
``program_name``        ``SHEDGEN_PROGRAM``  ``shed``
======================  ===================  ==================

Missing values are left as ``None``. Whether they are fatal depends on the
build step, which :func:`~shedgen.orchestrator.run` decides.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping, Optional

from shedgen.models import BuildEnvironment

ENV_DECLARED_VERSION = "PKG_VERSION"
ENV_PROFILE = "PROFILE"
ENV_OUT_DIR = "OUT_DIR"
ENV_MANIFEST_DIR = "MANIFEST_DIR"
ENV_TRIGGER = "SHEDGEN_TRIGGER"
ENV_PROGRAM = "SHEDGEN_PROGRAM"

DEFAULT_TRIGGER = "build.py"
DEFAULT_PROGRAM = "shed"


def _env_value(environ: Mapping[str, str], key: str) -> Optional[str]:
    """Return ``environ[key]``, treating empty strings as unset."""
    value = environ.get(key, "")
    return value if value else None


def _pick(cli_value: Optional[str], environ: Mapping[str, str], key: str) -> Optional[str]:
    if cli_value:
        return cli_value
    return _env_value(environ, key)


def load_build_environment(
    environ: Optional[Mapping[str, str]] = None,
    *,
    declared_version: Optional[str] = None,
    profile: Optional[str] = None,
    out_dir: Optional[str] = None,
    manifest_dir: Optional[str] = None,
    trigger_file: Optional[str] = None,
    program_name: Optional[str] = None,
) -> BuildEnvironment:
    """Resolve the build environment.

    Precedence (high to low):
        1. Keyword arguments (CLI flags)
        2. Environment variables (see module docstring)
        3. Defaults

    Args:
        environ: Environment mapping to read; defaults to ``os.environ``.

    Returns:
        A :class:`~shedgen.models.BuildEnvironment`. Required-ness is not
        checked here.
    """
    if environ is None:
        environ = os.environ

    resolved_out_dir = _pick(out_dir, environ, ENV_OUT_DIR)
    resolved_manifest = _pick(manifest_dir, environ, ENV_MANIFEST_DIR)

    return BuildEnvironment(
        declared_version=_pick(declared_version, environ, ENV_DECLARED_VERSION),
        profile=_pick(profile, environ, ENV_PROFILE),
        out_dir=Path(resolved_out_dir) if resolved_out_dir else None,
        manifest_dir=Path(resolved_manifest) if resolved_manifest else Path.cwd(),
        trigger_file=Path(_pick(trigger_file, environ, ENV_TRIGGER) or DEFAULT_TRIGGER),
        program_name=_pick(program_name, environ, ENV_PROGRAM) or DEFAULT_PROGRAM,
    )
