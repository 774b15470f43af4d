"""Build orchestrator -- the top-level driver of one build invocation.

Steps, in order:

1. **Always** resolve the version key and declare ``DEMON_VERSION``.
2. Read the build profile; a missing profile is fatal.
3. **Release only**: build the CLI description once and emit bash, zsh and
   PowerShell completions into ``OUT_DIR``, stopping at the first failure.
4. Declare the orchestrator's trigger file as a rebuild dependency.

Either all three completion files of a run exist afterwards or the run
failed; files already written by a failing run are removed again.
"""

from __future__ import annotations

from typing import Callable

from shedgen.cli import build_cli
from shedgen.completion import emit_artifact, validate_description
from shedgen.directives import BuildDirectives
from shedgen.exceptions import (
    BuildEnvironmentError,
    EmissionError,
    EmitError,
)
from shedgen.models import BuildEnvironment, BuildReport, CliDescription, CompletionArtifact, ShellDialect
from shedgen.output import debug, info, warning
from shedgen.version import register_version, require_declared_version, resolve_version

RELEASE_PROFILE = "release"


def run(
    env: BuildEnvironment,
    cli_factory: Callable[[], CliDescription] = build_cli,
) -> BuildReport:
    """Run the build step described by *env*.

    Args:
        env: Resolved build inputs, see
            :func:`~shedgen.config.load_build_environment`.
        cli_factory: Zero-argument constructor of the CLI description;
            only called for release builds.

    Returns:
        A :class:`~shedgen.models.BuildReport` with the version key, the
        written artifacts (none or three) and the directive lines for the
        build system.

    Raises:
        VersionResolutionError: ``PKG_VERSION`` is not set or is not a
            single line.
        BuildEnvironmentError: ``PROFILE`` is not set, or ``OUT_DIR`` is not
            set in a release build.
        EmissionError: A completion script could not be rendered or written.
    """
    directives = BuildDirectives()

    declared_version = require_declared_version(env.declared_version)
    version = resolve_version(declared_version, env.manifest_dir)
    register_version(version, directives)
    info(f"DEMON_VERSION={version.value}")

    if not env.profile:
        raise BuildEnvironmentError("Build profile is not set (PROFILE or --profile)")

    artifacts: tuple[CompletionArtifact, ...] = ()
    if env.profile == RELEASE_PROFILE:
        artifacts = _emit_completions(env, cli_factory)
    else:
        debug(f"Profile {env.profile!r} is not {RELEASE_PROFILE!r}; skipping completions")

    directives.rerun_if_changed(env.trigger_file)

    return BuildReport(
        version=version,
        profile=env.profile,
        artifacts=artifacts,
        directives=directives.lines(),
    )


def _emit_completions(
    env: BuildEnvironment,
    cli_factory: Callable[[], CliDescription],
) -> tuple[CompletionArtifact, ...]:
    if env.out_dir is None:
        raise BuildEnvironmentError("OUT_DIR must be set for release builds")

    cli = cli_factory()
    try:
        validate_description(cli, env.program_name)
    except EmitError as exc:
        raise EmissionError(f"Cannot generate completions: {exc}") from exc

    written: list[CompletionArtifact] = []
    for dialect in ShellDialect.ordered():
        try:
            written.append(emit_artifact(dialect, cli, env.program_name, env.out_dir))
        except EmitError as exc:
            _discard(written)
            raise EmissionError(
                f"Failed to generate {dialect.value} completions: {exc}", dialect=dialect
            ) from exc
    info(f"Generated {len(written)} completion scripts in {env.out_dir}")
    return tuple(written)


def _discard(artifacts: list[CompletionArtifact]) -> None:
    """Remove files written earlier in a run that is about to fail."""
    for artifact in artifacts:
        try:
            artifact.path.unlink()
        except FileNotFoundError:
            pass
        except OSError as exc:
            warning(f"Could not remove {artifact.path}: {exc}")
