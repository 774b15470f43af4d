"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~shedgen.exceptions.ShedgenError` subclass.
Build systems that invoke shedgen only need a non-zero status, but the
distinct codes let CI scripts tell an environment problem from a broken
CLI description without parsing stderr.

Example::

    $ PROFILE=release shedgen run
    $ echo $?
    4   # EXIT_ENVIRONMENT -- OUT_DIR is not set
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or unreadable inputs."""

EXIT_VERSION_RESOLUTION = 3
"""The declared package version could not be read from the environment."""

EXIT_ENVIRONMENT = 4
"""A required build environment variable (``PROFILE``, ``OUT_DIR``) is missing."""

EXIT_EMISSION = 5
"""A completion script could not be rendered or written."""
