"""Tests for the build orchestrator."""

from __future__ import annotations

from pathlib import Path

import pytest

from shedgen.cli import build_cli
from shedgen.completion import emitter
from shedgen.exceptions import (
    BuildEnvironmentError,
    EmissionError,
    EmitIoError,
    InvalidDescriptionError,
    VersionResolutionError,
)
from shedgen.models import BuildEnvironment, CompletionArtifact, FlagSpec, ShellDialect, VersionKey
from shedgen.orchestrator import _discard, run
from shedgen.output import OutputFormat, OutputManager, set_output


COMPLETION_FILES = {"shed.bash", "_shed", "_shed.ps1"}


def _env(tmp_path: Path, **overrides) -> BuildEnvironment:
    values = {
        "declared_version": "1.2.3",
        "profile": "debug",
        "out_dir": tmp_path / "out",
        "manifest_dir": tmp_path,
    }
    values.update(overrides)
    return BuildEnvironment(**values)


@pytest.fixture
def out_dir(tmp_path):
    path = tmp_path / "out"
    path.mkdir()
    return path


class TestVersionStep:
    def test_declares_version_and_trigger(self, tmp_path, out_dir, no_repo):
        report = run(_env(tmp_path))
        assert report.version.value == "1.2.3"
        assert report.directives == (
            "cargo:rustc-env=DEMON_VERSION=1.2.3",
            "cargo:rerun-if-changed=build.py",
        )

    def test_revision_from_repository(self, tmp_path, out_dir, fake_git):
        fake_git(dirty=False)
        report = run(_env(tmp_path))
        assert report.version.value == "1.2.3-abc123d"
        assert "cargo:rustc-env=DEMON_VERSION=1.2.3-abc123d" in report.directives

    def test_dirty_repository(self, tmp_path, out_dir, fake_git):
        fake_git(dirty=True)
        assert run(_env(tmp_path)).version.value == "1.2.3-abc123d-dirty"

    def test_custom_trigger_file(self, tmp_path, out_dir, no_repo):
        report = run(_env(tmp_path, trigger_file=Path("tools/gen.py")))
        assert report.directives[-1] == "cargo:rerun-if-changed=tools/gen.py"

    def test_missing_declared_version(self, tmp_path, out_dir, no_repo):
        with pytest.raises(VersionResolutionError) as exc_info:
            run(_env(tmp_path, declared_version=None))
        assert exc_info.value.exit_code == 3
        assert list(out_dir.iterdir()) == []

    def test_multi_line_declared_version(self, tmp_path, out_dir, no_repo):
        with pytest.raises(VersionResolutionError, match="single line") as exc_info:
            run(_env(tmp_path, declared_version="1.2.3\ncargo:rustc-flags=-l evil"))
        assert exc_info.value.exit_code == 3
        assert list(out_dir.iterdir()) == []

    def test_missing_profile(self, tmp_path, out_dir, no_repo):
        with pytest.raises(BuildEnvironmentError, match="profile") as exc_info:
            run(_env(tmp_path, profile=None))
        assert exc_info.value.exit_code == 4


class TestDebugProfile:
    def test_no_completions(self, tmp_path, out_dir, no_repo):
        report = run(_env(tmp_path, profile="debug"))
        assert report.artifacts == ()
        assert not report.is_release
        assert list(out_dir.iterdir()) == []

    def test_out_dir_not_required(self, tmp_path, no_repo):
        report = run(_env(tmp_path, out_dir=None))
        assert report.artifacts == ()

    def test_description_not_built(self, tmp_path, out_dir, no_repo):
        def _factory():
            raise AssertionError("description must not be built outside release")

        run(_env(tmp_path), cli_factory=_factory)

    @pytest.mark.parametrize("profile", ["Release", "release-lto", "bench"])
    def test_only_exact_release_emits(self, tmp_path, out_dir, no_repo, profile):
        assert run(_env(tmp_path, profile=profile)).artifacts == ()


class TestReleaseProfile:
    def test_emits_three_scripts(self, tmp_path, out_dir, no_repo):
        report = run(_env(tmp_path, profile="release"))
        assert report.is_release
        assert [a.dialect for a in report.artifacts] == list(ShellDialect.ordered())
        assert {p.name for p in out_dir.iterdir()} == COMPLETION_FILES

    def test_scripts_match_renderer(self, tmp_path, out_dir, no_repo):
        run(_env(tmp_path, profile="release"))
        for dialect in ShellDialect.ordered():
            path = out_dir / dialect.file_name("shed")
            assert path.read_text() == emitter.render(dialect, build_cli(), "shed")

    def test_rerun_is_idempotent(self, tmp_path, out_dir, no_repo):
        run(_env(tmp_path, profile="release"))
        before = {p.name: p.read_bytes() for p in out_dir.iterdir()}
        run(_env(tmp_path, profile="release"))
        after = {p.name: p.read_bytes() for p in out_dir.iterdir()}
        assert before == after

    def test_version_step_still_runs(self, tmp_path, out_dir, fake_git):
        fake_git()
        report = run(_env(tmp_path, profile="release"))
        assert report.directives[0] == "cargo:rustc-env=DEMON_VERSION=1.2.3-abc123d"

    def test_program_name(self, tmp_path, out_dir, no_repo):
        run(_env(tmp_path, profile="release", program_name="shed-dev"))
        assert {p.name for p in out_dir.iterdir()} == {"shed-dev.bash", "_shed-dev", "_shed-dev.ps1"}

    def test_description_built_once(self, tmp_path, out_dir, no_repo):
        calls = []

        def _factory():
            calls.append(1)
            return build_cli()

        run(_env(tmp_path, profile="release"), cli_factory=_factory)
        assert calls == [1]


class TestReleaseFailures:
    def test_missing_out_dir_variable(self, tmp_path, no_repo):
        with pytest.raises(BuildEnvironmentError, match="OUT_DIR") as exc_info:
            run(_env(tmp_path, profile="release", out_dir=None))
        assert exc_info.value.exit_code == 4
        assert list(tmp_path.iterdir()) == []

    def test_nonexistent_out_dir(self, tmp_path, no_repo):
        with pytest.raises(EmissionError) as exc_info:
            run(_env(tmp_path, profile="release", out_dir=tmp_path / "nope"))
        assert exc_info.value.dialect is ShellDialect.BASH
        assert isinstance(exc_info.value.__cause__, EmitIoError)
        assert not (tmp_path / "nope").exists()

    def test_invalid_description_writes_nothing(self, tmp_path, out_dir, no_repo):
        broken = build_cli().model_copy(update={"flags": (FlagSpec(name="x", short="h"),)})
        with pytest.raises(EmissionError) as exc_info:
            run(_env(tmp_path, profile="release"), cli_factory=lambda: broken)
        assert isinstance(exc_info.value.__cause__, InvalidDescriptionError)
        assert exc_info.value.exit_code == 5
        assert list(out_dir.iterdir()) == []

    def test_partial_failure_removes_earlier_files(self, tmp_path, out_dir, no_repo, monkeypatch):
        real_emit = emitter.emit_artifact

        def _flaky(dialect, cli, program_name, directory):
            if dialect is ShellDialect.ZSH:
                raise EmitIoError("disk full")
            return real_emit(dialect, cli, program_name, directory)

        monkeypatch.setattr("shedgen.orchestrator.emit_artifact", _flaky)
        with pytest.raises(EmissionError, match="zsh") as exc_info:
            run(_env(tmp_path, profile="release"))
        assert exc_info.value.dialect is ShellDialect.ZSH
        assert list(out_dir.iterdir()) == []

    def test_report_version_type(self, tmp_path, out_dir, no_repo):
        assert isinstance(run(_env(tmp_path)).version, VersionKey)


class TestDiscard:
    def test_missing_file_is_ignored(self, tmp_path, capsys):
        set_output(OutputManager(format=OutputFormat.PLAIN, no_color=True))
        _discard([CompletionArtifact(dialect=ShellDialect.BASH, path=tmp_path / "gone.bash", size=0)])
        assert capsys.readouterr().err == ""

    def test_unremovable_file_warns(self, tmp_path, capsys):
        stuck = tmp_path / "shed.bash"
        stuck.mkdir()
        set_output(OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True))
        _discard([CompletionArtifact(dialect=ShellDialect.BASH, path=stuck, size=0)])
        err = capsys.readouterr().err
        assert err.startswith("Warning: Could not remove")
        assert str(stuck) in err
        assert stuck.is_dir()
