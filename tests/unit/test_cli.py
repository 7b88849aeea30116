"""Tests for CLI commands."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from safecond.cli import app


@pytest.fixture
def cli_runner():
    """Return a CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def _clear_limit_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("SAFECOND_MAX_LENGTH", raising=False)
    monkeypatch.delenv("SAFECOND_MAX_DEPTH", raising=False)


def _reject_constant(name: str) -> None:
    raise ValueError(f"non-standard JSON constant {name}")


class TestEval:
    def test_condition(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            app, ["eval", "x < 10 && y > 5", "--var", "x=5", "--var", "y=10"]
        )
        assert result.exit_code == 0, result.output
        assert result.output.strip() == "true"

    def test_arithmetic(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["eval", "(1 + 2) * 3"])
        assert result.exit_code == 0
        assert result.output.strip() == "9"

    def test_boolean_variable(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["eval", "!flag", "--var", "flag=false"])
        assert result.exit_code == 0
        assert result.output.strip() == "true"

    def test_json_output(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["eval", "a / 4", "--var", "a=1", "--json"])
        assert result.exit_code == 0
        assert json.loads(result.output) == {"kind": "number", "value": 0.25}

    @pytest.mark.parametrize(
        ("expression", "expected"),
        [("1/0", "Infinity"), ("0 - 1/0", "-Infinity"), ("0/0", "NaN")],
    )
    def test_json_non_finite_is_strict_json(
        self, cli_runner: CliRunner, expression: str, expected: str
    ) -> None:
        result = cli_runner.invoke(app, ["eval", expression, "--json"])
        assert result.exit_code == 0
        payload = json.loads(result.output, parse_constant=_reject_constant)
        assert payload == {"kind": "number", "value": expected}

    def test_expression_error(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["eval", "1 + @"])
        assert result.exit_code == 1
        assert "Unexpected character" in result.output
        assert "^" in result.output

    def test_undefined_variable(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["eval", "z"])
        assert result.exit_code == 1
        assert "Undefined variable: z" in result.output

    def test_blocked_identifier_not_echoed_in_message(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["eval", "1"])
        assert result.exit_code == 0
        result = cli_runner.invoke(app, ["eval", "constructor"])
        assert result.exit_code == 1
        assert "Blocked identifier" in result.output

    @pytest.mark.parametrize("binding", ["x", "=5", "x=abc"])
    def test_bad_var(self, cli_runner: CliRunner, binding: str) -> None:
        result = cli_runner.invoke(app, ["eval", "x", "--var", binding])
        assert result.exit_code == 2


class TestCheck:
    def test_check(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["check", "a || b && c > 1"])
        assert result.exit_code == 0
        assert "OK" in result.output
        assert "(a || (b && (c > 1)))" in result.output
        assert "a, b, c" in result.output
        assert "boolean" in result.output

    def test_check_number_result(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["check", "1 + 2"])
        assert result.exit_code == 0
        assert "number" in result.output

    def test_check_long_flat_chain(self, cli_runner: CliRunner) -> None:
        source = "+".join(["1"] * 500)
        result = cli_runner.invoke(app, ["check", source])
        assert result.exit_code == 0, result.output
        assert "OK" in result.output
        assert "number" in result.output

    def test_check_invalid(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["check", "(1 + 2"])
        assert result.exit_code == 1
        assert "Expected ')'" in result.output


class TestTokens:
    def test_tokens(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["tokens", "a >= 1"])
        assert result.exit_code == 0
        assert "ident" in result.output
        assert ">=" in result.output
        assert "eof" in result.output


class TestGlobalOptions:
    def test_version(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert result.output.startswith("safecond ")

    def test_config_limits(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        config = tmp_path / "safecond.toml"
        config.write_text("[safecond]\nmax_length = 5\n")
        result = cli_runner.invoke(app, ["--config", str(config), "eval", "1 + 2 + 3"])
        assert result.exit_code == 1
        assert "too long" in result.output

    def test_invalid_config(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        config = tmp_path / "safecond.toml"
        config.write_text("[safecond]\nmax_length = 0\n")
        result = cli_runner.invoke(app, ["--config", str(config), "eval", "1"])
        assert result.exit_code == 2

    def test_env_limits(self, cli_runner: CliRunner, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SAFECOND_MAX_DEPTH", "1")
        result = cli_runner.invoke(app, ["eval", "((1))"])
        assert result.exit_code == 1
        assert "nested deeper" in result.output
