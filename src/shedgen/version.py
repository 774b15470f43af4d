"""Version resolver -- derive ``DEMON_VERSION`` from the declared version and VCS state.

The declared package version is combined with the short identifier of the
current version-control revision, plus a ``-dirty`` suffix when the working
tree has uncommitted modifications::

    1.2.3                  no repository (or any lookup failure)
    1.2.3-abc123d          clean checkout
    1.2.3-abc123d-dirty    tracked files modified

Both Mercurial and git checkouts are recognised. git repositories are read
in-process through :mod:`pygit2`; Mercurial has no libgit2 counterpart, so
``hg`` is run as a subprocess. When both kinds of repository enclose the
build directory the nearest one wins, and Mercurial wins a tie.

Nothing in this module fails the build: a missing ``hg`` binary, a
repository without commits or any OS error all degrade to the declared
version. The reason is reported with :func:`~shedgen.output.debug` and
therefore only visible with ``--verbose``.
"""

from __future__ import annotations

import os
import subprocess
from pathlib import Path
from typing import Optional

import pygit2

from shedgen.directives import BuildDirectives
from shedgen.exceptions import VersionResolutionError
from shedgen.fileio import atomic_write
from shedgen.models import VersionKey
from shedgen.output import debug

VERSION_CONSTANT = "DEMON_VERSION"
REVISION_LENGTH = 7

# hg reports the null revision for a repository without commits.
_HG_NULL_NODE = "0" * 40

# Status bits that do not make a git working tree dirty.
_GIT_CLEAN_STATUS = pygit2.GIT_STATUS_WT_NEW | pygit2.GIT_STATUS_IGNORED

_PYGIT2_ERRORS = (KeyError, ValueError, pygit2.GitError)


class _VcsLookupError(Exception):
    """Internal signal that a VCS query failed; never leaves this module."""


def require_declared_version(declared_version: Optional[str]) -> str:
    """Return *declared_version* if it can be embedded as a build constant.

    Raises:
        VersionResolutionError: If the version is missing or spans more
            than one line.
    """
    if not declared_version:
        raise VersionResolutionError(
            "Declared package version is not set (PKG_VERSION or --declared-version)"
        )
    if "\n" in declared_version or "\r" in declared_version:
        raise VersionResolutionError(
            f"Declared package version must be a single line, got {declared_version!r}"
        )
    return declared_version


def _run_hg(args: list[str], cwd: Path) -> str:
    """Run an ``hg`` command in *cwd* and return its stripped stdout.

    Raises:
        _VcsLookupError: If the binary is missing or exits non-zero.
    """
    env = dict(os.environ)
    # Stable, unlocalised output.
    env["HGPLAIN"] = "1"
    env["LC_ALL"] = "C"
    try:
        result = subprocess.run(
            ["hg", *args],
            cwd=str(cwd),
            capture_output=True,
            text=True,
            env=env,
        )
    except OSError as exc:
        raise _VcsLookupError(f"hg could not be run: {exc}") from exc
    if result.returncode != 0:
        detail = result.stderr.strip().splitlines()
        raise _VcsLookupError(
            f"hg {' '.join(args)} exited with {result.returncode}"
            + (f": {detail[-1]}" if detail else "")
        )
    return result.stdout.strip()


def _find_hg_root(start: Path) -> Optional[Path]:
    for candidate in (start, *start.parents):
        if (candidate / ".hg").is_dir():
            return candidate
    return None


def _find_git_root(start: Path) -> Optional[Path]:
    """Working-tree root of the git repository enclosing *start*, if any."""
    try:
        git_dir = pygit2.discover_repository(str(start))
    except _PYGIT2_ERRORS:
        return None
    if git_dir is None:
        return None
    try:
        repo = pygit2.Repository(git_dir)
    except _PYGIT2_ERRORS:
        return None
    # Bare repositories have no working tree to describe.
    if not repo.workdir:
        return None
    return Path(repo.workdir).resolve()


def find_repository(start: Path) -> Optional[tuple[str, Path]]:
    """Locate the repository rooted at or above *start*.

    Returns:
        ``("hg" | "git", root)`` for the nearest repository, or ``None``.
    """
    try:
        current = Path(start).resolve()
    except OSError:
        return None
    hg_root = _find_hg_root(current)
    git_root = _find_git_root(current)
    if git_root is None and hg_root is None:
        return None
    if git_root is None or (hg_root is not None and len(hg_root.parts) >= len(git_root.parts)):
        return "hg", hg_root
    return "git", git_root


def _git_state(root: Path) -> tuple[str, Optional[bool]]:
    try:
        repo = pygit2.Repository(str(root))
        if repo.head_is_unborn:
            raise _VcsLookupError("repository has no commits")
        node = str(repo.head.peel(pygit2.Commit).id)
    except _PYGIT2_ERRORS as exc:
        raise _VcsLookupError(f"HEAD could not be read: {exc}") from exc
    try:
        status = repo.status()
    except pygit2.GitError as exc:
        debug(f"Could not determine working tree state: {exc}")
        return node, None
    return node, any(flags & ~_GIT_CLEAN_STATUS for flags in status.values())


def _hg_state(root: Path) -> tuple[str, Optional[bool]]:
    node = _run_hg(["log", "-r", ".", "--template", "{node}"], root)
    if not node or node == _HG_NULL_NODE:
        raise _VcsLookupError("repository has no commits")
    try:
        status = _run_hg(["status", "-mard"], root)
    except _VcsLookupError as exc:
        debug(f"Could not determine working tree state: {exc}")
        return node, None
    return node, bool(status)


_BACKENDS = {
    "git": _git_state,
    "hg": _hg_state,
}


def resolve_version(declared_version: str, repo_path: Path) -> VersionKey:
    """Combine *declared_version* with the revision of the repository at *repo_path*.

    Args:
        declared_version: The package's declared semantic version.
        repo_path: The build working directory; the repository may be
            rooted here or in any parent directory.

    Returns:
        A :class:`~shedgen.models.VersionKey`. Its ``value`` is
        *declared_version* unchanged when no revision could be read.
    """
    found = find_repository(Path(repo_path))
    if found is None:
        debug(f"No repository found at or above {repo_path}; using {declared_version}")
        return VersionKey(declared_version=declared_version)

    vcs, root = found
    try:
        node, dirty = _BACKENDS[vcs](root)
    except _VcsLookupError as exc:
        debug(f"{vcs} repository at {root} could not be read ({exc}); using {declared_version}")
        return VersionKey(declared_version=declared_version)

    return VersionKey(
        declared_version=declared_version,
        revision=node[:REVISION_LENGTH],
        dirty=dirty,
        vcs=vcs,
    )


def register_version(key: VersionKey, directives: BuildDirectives) -> None:
    """Expose *key* to the compiled program as the ``DEMON_VERSION`` constant."""
    directives.set_env(VERSION_CONSTANT, key.value)


def write_version_module(key: VersionKey, path: Path) -> Path:
    """Write a Python module defining ``DEMON_VERSION`` for *key*.

    The file is replaced atomically so a concurrent import never sees a
    half-written module.
    """
    content = (
        "# Generated by shedgen at build time. Do not edit.\n"
        f"{VERSION_CONSTANT} = {key.value!r}\n"
    )
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    atomic_write(path, content)
    return path
