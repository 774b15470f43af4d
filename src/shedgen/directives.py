"""Build-system directive adapter.

The build system learns about build-time constants and rebuild triggers
from specially formatted lines on the generator's stdout::

    cargo:rustc-env=DEMON_VERSION=1.2.3-abc123d
    cargo:rerun-if-changed=build.py

:class:`BuildDirectives` is the only place that knows this line protocol.
The orchestrator records directives on it and the CLI layer flushes them to
stdout once the build step has succeeded.
"""

from __future__ import annotations

from pathlib import Path

DIRECTIVE_PREFIX = "cargo:"


class BuildDirectives:
    """Ordered collection of build-system directives."""

    def __init__(self) -> None:
        self._lines: list[str] = []
        self._env: dict[str, str] = {}

    def set_env(self, key: str, value: str) -> None:
        """Declare a build-time constant visible to the compiled program."""
        if "\n" in value or "=" in key:
            raise ValueError(f"Invalid build constant {key!r}={value!r}")
        self._env[key] = value
        self._lines.append(f"{DIRECTIVE_PREFIX}rustc-env={key}={value}")

    def rerun_if_changed(self, path: Path | str) -> None:
        """Declare that the generator must re-run when *path* changes."""
        self._lines.append(f"{DIRECTIVE_PREFIX}rerun-if-changed={Path(path).as_posix()}")

    @property
    def env(self) -> dict[str, str]:
        """Build-time constants declared so far."""
        return dict(self._env)

    def lines(self) -> tuple[str, ...]:
        return tuple(self._lines)
