"""Tests for the dflowlib command-line interface."""

import json

from click.testing import CliRunner

from dflowlib.cli import cli


class TestCli:
    def test_help(self):
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "validate" in result.output
        assert "benchmark" in result.output

    def test_validate_passes(self):
        result = CliRunner().invoke(cli, ["validate"])
        assert result.exit_code == 0, result.output
        assert "[PASS] synthetic_15yr" in result.output
        assert "[FAIL]" not in result.output

    def test_benchmark_text(self):
        result = CliRunner().invoke(cli, ["benchmark"])
        assert result.exit_code == 0
        assert "DFLOW benchmark validation: 4 of 4 passed" in result.output
        assert "PASS  constant_20yr" in result.output
        assert "N=14 of NY=15 water years" in result.output

    def test_benchmark_json(self):
        result = CliRunner().invoke(cli, ["benchmark", "--format", "json"])
        assert result.exit_code == 0
        payload = json.loads(result.output)
        assert payload["passed"] == payload["total"]
        assert "synthetic_15yr_gap" in payload["benchmarks"]

    def test_unknown_format_rejected(self):
        result = CliRunner().invoke(cli, ["benchmark", "--format", "csv"])
        assert result.exit_code != 0
