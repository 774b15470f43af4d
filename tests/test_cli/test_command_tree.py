"""Tests for building a click command tree from a CLI description."""

from __future__ import annotations

import click
import pytest
from click.testing import CliRunner

from shedgen.cli import build_cli, build_command
from shedgen.models import CliDescription, FlagSpec


@pytest.fixture
def calls():
    return []


@pytest.fixture
def shed(calls):
    return build_command(build_cli(), lambda path, params: calls.append((path, params)))


@pytest.fixture
def runner():
    return CliRunner()


class TestStructure:
    def test_root_is_group(self, shed):
        assert isinstance(shed, click.Group)
        assert shed.name == "shed"

    def test_subcommands_and_aliases_registered(self, shed):
        assert {"status", "st", "serve", "pull", "push", "pack", "unpack", "store"} <= set(shed.commands)
        assert shed.commands["st"] is shed.commands["status"]

    def test_nested_group(self, shed):
        store = shed.commands["store"]
        assert isinstance(store, click.Group)
        assert set(store.commands) == {"list", "ls", "gc"}

    def test_leaf_only_description_builds_command(self):
        cli = CliDescription(name="solo", flags=(FlagSpec(name="force", short="f"),))
        command = build_command(cli)
        assert not isinstance(command, click.Group)


class TestParsing:
    def test_leaf_receives_path_and_params(self, shed, runner, calls):
        result = runner.invoke(shed, ["status", "--remote"])
        assert result.exit_code == 0, result.output
        path, params = calls[0]
        assert path == ("shed", "status")
        assert params["remote"] is True
        assert params["json"] is False

    def test_alias_dispatches_to_canonical_path(self, shed, runner, calls):
        result = runner.invoke(shed, ["store", "ls", "-l"])
        assert result.exit_code == 0, result.output
        path, params = calls[0]
        assert path == ("shed", "store", "list")
        assert params["long"] is True

    def test_group_flags_reach_the_leaf(self, shed, runner, calls):
        result = runner.invoke(shed, ["-v", "-v", "-c", "shed.toml", "st"])
        assert result.exit_code == 0, result.output
        _, params = calls[0]
        assert params["verbose"] == 2
        assert params["config"] == "shed.toml"

    def test_dashed_flag_name(self, shed, runner, calls):
        runner.invoke(shed, ["store", "gc", "--dry-run"])
        assert calls[0][1]["dry_run"] is True

    def test_choices_enforced(self, shed, runner, calls):
        result = runner.invoke(shed, ["serve", "--engine", "ftp"])
        assert result.exit_code == 2
        assert calls == []

    def test_choice_accepted(self, shed, runner, calls):
        result = runner.invoke(shed, ["pack", "-f", "tar.zst", "src"])
        assert result.exit_code == 0, result.output
        assert calls[0][1]["format"] == "tar.zst"
        assert calls[0][1]["input"] == "src"

    def test_required_argument(self, shed, runner, calls):
        result = runner.invoke(shed, ["push"])
        assert result.exit_code == 2
        assert calls == []

    def test_unknown_flag_rejected(self, shed, runner):
        result = runner.invoke(shed, ["status", "--nope"])
        assert result.exit_code == 2

    def test_short_help(self, shed, runner):
        result = runner.invoke(shed, ["serve", "-h"])
        assert result.exit_code == 0
        assert "--engine" in result.output


class TestVersionOption:
    def test_version_flag_when_described(self):
        cli = build_cli().model_copy(update={"version": "1.2.3-abc123d"})
        result = CliRunner().invoke(build_command(cli), ["-V"])
        assert result.exit_code == 0
        assert "1.2.3-abc123d" in result.output

    def test_no_version_flag_by_default(self, shed, runner):
        result = runner.invoke(shed, ["--version"])
        assert result.exit_code == 2


class TestDryRun:
    def test_default_dispatch_echoes_command(self, runner):
        result = runner.invoke(build_command(build_cli()), ["unpack", "--replace", "a.tar"])
        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert lines[0] == "shed unpack"
        assert '"replace": true' in lines[1]
        assert '"input": "a.tar"' in lines[1]
