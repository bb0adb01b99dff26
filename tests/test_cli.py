"""Tests for PipeQL CLI commands."""

import json

import pytest
import yaml
from click.testing import CliRunner

from pipeql.cli.main import cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv("PIPEQL_MAX_DEPTH", raising=False)


class TestTokens:
    def test_lists_tokens(self, runner):
        result = runner.invoke(cli, ["tokens", "@.a | f 1"])

        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert len(lines) == 6
        assert "REFERENCE" in lines[0]
        assert "'@'" in lines[0]
        assert "SPECIAL" in lines[3]
        assert "VALUE" in lines[5]

    def test_lex_error(self, runner):
        result = runner.invoke(cli, ["tokens", "a # b"])

        assert result.exit_code == 1
        assert "Unexpected character '#'" in result.output


class TestParse:
    def test_json_output(self, runner):
        result = runner.invoke(cli, ["parse", "sup nernd"])

        assert result.exit_code == 0
        assert json.loads(result.output) == {
            "type": "application",
            "function": {"type": "reference", "path": ["sup"]},
            "arguments": [{"type": "reference", "path": ["nernd"]}],
        }

    def test_yaml_output(self, runner):
        result = runner.invoke(cli, ["parse", "--format", "yaml", "hello | there"])

        assert result.exit_code == 0
        assert yaml.safe_load(result.output) == {
            "type": "pipeline",
            "stages": [
                {"type": "reference", "path": ["hello"]},
                {"type": "reference", "path": ["there"]},
            ],
        }

    def test_reads_stdin(self, runner):
        result = runner.invoke(cli, ["parse", "-"], input="@.items\n")

        assert result.exit_code == 0
        assert json.loads(result.output) == {"type": "reference", "path": ["@", "items"]}

    def test_parse_error(self, runner):
        result = runner.invoke(cli, ["parse", "()"])

        assert result.exit_code == 1
        assert "Empty parenthetical expression" in result.output

    def test_max_depth_option(self, runner):
        result = runner.invoke(cli, ["--max-depth", "1", "parse", "((a))"])

        assert result.exit_code == 1
        assert "nested deeper than 1" in result.output

    def test_env_config(self, runner, monkeypatch):
        monkeypatch.setenv("PIPEQL_MAX_DEPTH", "1")

        result = runner.invoke(cli, ["parse", "((a))"])

        assert result.exit_code == 1
        assert "nested deeper than 1" in result.output

    def test_invalid_env_config(self, runner, monkeypatch):
        monkeypatch.setenv("PIPEQL_MAX_DEPTH", "lots")

        result = runner.invoke(cli, ["parse", "a"])

        assert result.exit_code == 2
        assert "PIPEQL_MAX_DEPTH" in result.output


class TestCheck:
    def test_all_valid(self, runner):
        result = runner.invoke(cli, ["check", "a | b", "f (g x)"])

        assert result.exit_code == 0
        assert "All 2 expression(s) parse" in result.output

    def test_reports_failures(self, runner):
        result = runner.invoke(cli, ["check", "a | b", "()", "a |"])

        assert result.exit_code == 1
        assert "✓ a | b" in result.output
        assert "2 expression(s) failed to parse" in result.output

    def test_requires_an_expression(self, runner):
        result = runner.invoke(cli, ["check"])

        assert result.exit_code == 2


class TestFormat:
    def test_canonical_output(self, runner):
        result = runner.invoke(cli, ["format", "hello|(there|hi)|(whatup)"])

        assert result.exit_code == 0
        assert result.output == "hello | (there | hi) | whatup\n"

    def test_format_error(self, runner):
        result = runner.invoke(cli, ["format", "a."])

        assert result.exit_code == 1
        assert "Expected identifier after '.'" in result.output
