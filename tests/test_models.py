"""Tests for the shared Pydantic models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from shedgen.models import (
    BuildReport,
    CliDescription,
    CommandSpec,
    FlagSpec,
    ShellDialect,
    ValueHint,
    VersionKey,
)


class TestFlagSpec:
    def test_forms_short_first(self):
        flag = FlagSpec(name="config", short="c", takes_value=True)
        assert flag.forms == ("-c", "--config")

    def test_long_only(self):
        flag = FlagSpec(name="json")
        assert flag.short_form is None
        assert flag.forms == ("--json",)

    def test_metavar_defaults_to_upper_name(self):
        assert FlagSpec(name="dry-run", takes_value=True).metavar == "DRY_RUN"
        assert FlagSpec(name="output", takes_value=True, value_name="FILE").metavar == "FILE"

    def test_frozen(self):
        flag = FlagSpec(name="config")
        with pytest.raises(ValidationError):
            flag.name = "other"

    def test_value_hint_from_string(self):
        assert FlagSpec.model_validate({"name": "o", "value_hint": "dir"}).value_hint is ValueHint.DIR


class TestCommandTree:
    def test_walk_is_depth_first_with_full_paths(self, small_cli):
        paths = [path for path, _ in small_cli.walk()]
        assert paths == [
            ("tool",),
            ("tool", "build"),
            ("tool", "remote"),
            ("tool", "remote", "add"),
        ]

    def test_find_by_name_and_alias(self, small_cli):
        assert small_cli.find(["build"]).name == "build"
        assert small_cli.find(("b",)).name == "build"
        assert small_cli.find(["remote", "add"]).name == "add"
        assert small_cli.find([]) is small_cli

    def test_find_missing(self, small_cli):
        assert small_cli.find(["nope"]) is None
        assert small_cli.find(["build", "deeper"]) is None

    def test_description_is_subclass_of_command(self):
        cli = CliDescription(name="x", subcommands=(CommandSpec(name="y"),))
        assert isinstance(cli, CommandSpec)
        assert cli.version is None

    def test_equal_trees_compare_equal(self, small_cli):
        assert CliDescription.model_validate(small_cli.model_dump()) == small_cli


class TestShellDialect:
    @pytest.mark.parametrize(
        "dialect,expected",
        [
            (ShellDialect.BASH, "shed.bash"),
            (ShellDialect.ZSH, "_shed"),
            (ShellDialect.POWERSHELL, "_shed.ps1"),
        ],
    )
    def test_file_names(self, dialect, expected):
        assert dialect.file_name("shed") == expected

    def test_file_names_are_distinct(self):
        names = {d.file_name("shed") for d in ShellDialect}
        assert len(names) == 3

    def test_ordered(self):
        assert ShellDialect.ordered() == (
            ShellDialect.BASH,
            ShellDialect.ZSH,
            ShellDialect.POWERSHELL,
        )


class TestVersionKey:
    def test_declared_only(self):
        assert VersionKey(declared_version="1.2.3").value == "1.2.3"

    def test_with_revision(self):
        key = VersionKey(declared_version="1.2.3", revision="abc123d", dirty=False, vcs="git")
        assert key.value == "1.2.3-abc123d"
        assert str(key) == "1.2.3-abc123d"

    def test_dirty_suffix(self):
        key = VersionKey(declared_version="1.2.3", revision="abc123d", dirty=True)
        assert key.value == "1.2.3-abc123d-dirty"

    def test_unknown_cleanliness_has_no_suffix(self):
        key = VersionKey(declared_version="1.2.3", revision="abc123d", dirty=None)
        assert key.value == "1.2.3-abc123d"

    def test_value_starts_with_declared_version(self):
        key = VersionKey(declared_version="0.0.1-beta", revision="0123456", dirty=True)
        assert key.value.startswith("0.0.1-beta")


class TestBuildReport:
    def test_is_release(self):
        key = VersionKey(declared_version="1.0.0")
        assert BuildReport(version=key, profile="release").is_release
        assert not BuildReport(version=key, profile="debug").is_release
