"""Exception hierarchy for shedgen.

All exceptions inherit from :class:`ShedgenError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`shedgen.exit_codes`.
The top-level error handler in :func:`shedgen.app.main` catches
``ShedgenError`` and exits with the appropriate code, while unexpected
exceptions produce a crash report and exit with :data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    ShedgenError (exit 1)
    +-- InvalidUsageError            (exit 2)
    +-- DescriptionLoadError         (exit 2)
    +-- BuildError                   (exit 1)
    |   +-- VersionResolutionError   (exit 3)
    |   +-- BuildEnvironmentError    (exit 4)
    |   +-- EmissionError            (exit 5)
    +-- EmitError                    (exit 5)
        +-- EmitIoError
        +-- InvalidDescriptionError

Version-control lookup failures have no exception class: the version
resolver degrades to the declared version instead of raising.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from shedgen.exit_codes import (
    EXIT_EMISSION,
    EXIT_ENVIRONMENT,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_VERSION_RESOLUTION,
)

if TYPE_CHECKING:
    from shedgen.models import ShellDialect


class ShedgenError(Exception):
    """Base exception for all shedgen errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`shedgen.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(ShedgenError):
    """Raised for invalid CLI arguments (e.g. an unknown shell name)."""

    exit_code = EXIT_INVALID_USAGE


class DescriptionLoadError(ShedgenError):
    """Raised when an external CLI description file cannot be read or parsed."""

    exit_code = EXIT_INVALID_USAGE


# --- Build errors (raised by the orchestrator) ---


class BuildError(ShedgenError):
    """Base class for fatal orchestrator failures."""


class VersionResolutionError(BuildError):
    """Raised when the declared package version is not available at all.

    This signals an environment read failure (``PKG_VERSION`` unset), never
    a version-control lookup failure.
    """

    exit_code = EXIT_VERSION_RESOLUTION


class BuildEnvironmentError(BuildError):
    """Raised when ``PROFILE``, or ``OUT_DIR`` in a release build, is missing."""

    exit_code = EXIT_ENVIRONMENT


class EmissionError(BuildError):
    """Raised when a completion script could not be emitted during a build.

    The underlying :class:`EmitError` is chained as ``__cause__``.

    Args:
        message: Human-readable error description.
        dialect: The shell dialect whose emission failed, if known.
    """

    exit_code = EXIT_EMISSION

    def __init__(self, message: str, dialect: Optional["ShellDialect"] = None):
        super().__init__(message)
        self.dialect = dialect


# --- Emitter errors ---


class EmitError(ShedgenError):
    """Base class for completion emitter failures."""

    exit_code = EXIT_EMISSION


class EmitIoError(EmitError):
    """Raised when a completion file cannot be created or written."""


class InvalidDescriptionError(EmitError):
    """Raised when the CLI description tree is malformed.

    Args:
        message: Human-readable error description.
        path: Command path (program name first) of the offending node.
    """

    def __init__(self, message: str, path: tuple[str, ...] = ()):
        where = " ".join(path)
        super().__init__(f"{where}: {message}" if where else message)
        self.path = path
