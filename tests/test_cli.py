"""Tests for the root depresolve CLI."""

from click.testing import CliRunner

from depresolve import __version__
from depresolve.cli import cli


def test_cli_help(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "depresolve" in result.output
    assert "graph" in result.output


def test_cli_version(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_cli_no_args(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, [])
    assert result.exit_code == 0
    assert "Usage" in result.output


# --- Global flags ---


def test_json_flag_accepted(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--json", "--version"])
    assert result.exit_code == 0


def test_registry_option_accepted(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["-r", "app.deps:registry", "--version"])
    assert result.exit_code == 0


def test_graph_group_help(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["graph", "--help"])
    assert result.exit_code == 0
    for name in ("show", "cycles", "plan"):
        assert name in result.output
