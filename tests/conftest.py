"""Shared test fixtures for shedgen.

Provides fixtures that isolate the build environment, fake version-control
lookups and reset the global output manager, plus a small description tree.
These fixtures are automatically discovered by pytest and available to
all test modules without explicit imports.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from shedgen.models import ArgSpec, CliDescription, CommandSpec, FlagSpec, ValueHint
from shedgen.output import reset_output


BUILD_ENV_VARS = [
    "PKG_VERSION",
    "PROFILE",
    "OUT_DIR",
    "MANIFEST_DIR",
    "SHEDGEN_TRIGGER",
    "SHEDGEN_PROGRAM",
]

FAKE_NODE = "abc123d" + "e" * 33


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Build environment isolation
# ---------------------------------------------------------------------------


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove every build environment variable shedgen reads."""
    for var in BUILD_ENV_VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def no_repo(monkeypatch: pytest.MonkeyPatch) -> None:
    """Pretend no repository exists above any directory."""
    monkeypatch.setattr("shedgen.version.find_repository", lambda start: None)


@pytest.fixture
def fake_git(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Callable[..., None]:
    """Make *tmp_path* a git checkout whose HEAD and cleanliness are scripted.

    Call the returned function with ``node`` (``None`` for a repository
    without commits) and ``dirty`` (``None`` when the status lookup fails).
    """
    from shedgen import version

    state: dict[str, object] = {"node": FAKE_NODE, "dirty": False}

    def _fake_state(root: Path) -> tuple[str, bool | None]:
        if state["node"] is None:
            raise version._VcsLookupError("repository has no commits")
        return state["node"], state["dirty"]

    monkeypatch.setattr(version, "find_repository", lambda start: ("git", tmp_path))
    monkeypatch.setitem(version._BACKENDS, "git", _fake_state)

    def configure(node: str | None = FAKE_NODE, dirty: bool | None = False) -> None:
        state["node"] = node
        state["dirty"] = dirty

    return configure


# ---------------------------------------------------------------------------
# Description fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def small_cli() -> CliDescription:
    """A compact two-level description exercising every renderer feature."""
    return CliDescription(
        name="tool",
        help="A tool",
        version="2.0.0",
        flags=(
            FlagSpec(name="config", short="c", takes_value=True, value_hint=ValueHint.FILE, help="Config file"),
            FlagSpec(name="verbose", short="v", multiple=True, help="More output"),
        ),
        subcommands=(
            CommandSpec(
                name="build",
                aliases=("b",),
                help="Build things",
                flags=(
                    FlagSpec(name="mode", short="m", takes_value=True, choices=("fast", "slow"), help="Build mode"),
                    FlagSpec(name="target-dir", takes_value=True, value_hint=ValueHint.DIR, help="Where to build"),
                ),
                args=(ArgSpec(name="project", required=True, value_hint=ValueHint.DIR),),
            ),
            CommandSpec(
                name="remote",
                help="Remote hosts",
                subcommands=(
                    CommandSpec(
                        name="add",
                        help="Add a host",
                        flags=(FlagSpec(name="host", takes_value=True, value_hint=ValueHint.HOSTNAME),),
                    ),
                ),
            ),
        ),
    )
