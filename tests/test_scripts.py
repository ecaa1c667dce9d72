from pathlib import Path

import pytest
from typer.testing import CliRunner

from tmsim.scripts import INCONCLUSIVE, app

runner = CliRunner()


def test_run_bundled_machine():
    result = runner.invoke(app, ["run", "increment", "1", "1"])
    assert result.exit_code == 0
    assert "Halted in state A after 3 steps." in result.output
    assert "Tape: 1 1 1" in result.output


def test_run_blank_tape():
    result = runner.invoke(app, ["run", "blank_check"])
    assert result.exit_code == 0
    assert "Tape: (blank)" in result.output


def test_run_reject():
    result = runner.invoke(app, ["run", "blank_check", "1"])
    assert result.exit_code == 0
    assert "Halted in state R" in result.output


def test_run_from_file(tmp_path: Path):
    tm_file = tmp_path / "loop.TM"
    tm_file.write_text("1\n1\n1 _ 1 _ R\n1 1 1 1 R\n")
    result = runner.invoke(app, ["run", str(tm_file), "1", "--limit", "50"])
    assert result.exit_code == INCONCLUSIVE
    assert "inconclusive" in result.output


def test_run_malformed_file(tmp_path: Path):
    tm_file = tmp_path / "broken.TM"
    tm_file.write_text("1\n1\n1 _ A _ N\n")
    result = runner.invoke(app, ["run", str(tm_file)])
    assert result.exit_code == 1
    assert "formatted incorrectly" in result.output


def test_run_unknown_machine():
    result = runner.invoke(app, ["run", "does_not_exist"])
    assert result.exit_code == 1
    assert "Could not find" in result.output


def test_run_invalid_input():
    result = runner.invoke(app, ["run", "increment", "x"])
    assert result.exit_code == 1
    assert "Invalid input" in result.output


def test_run_contract_violation(tmp_path: Path):
    tm_file = tmp_path / "partial.TM"
    tm_file.write_text("1\n1\n1 1 1 1 R\n")
    result = runner.invoke(app, ["run", str(tm_file), "1"])
    assert result.exit_code == 1
    assert "MissingTransition" in result.output
    assert "Configuration sequence" in result.output


def test_trace_shows_every_step():
    result = runner.invoke(app, ["trace", "increment", "1", "--tail", "0"])
    assert result.exit_code == 0
    assert "Configuration sequence" in result.output
    for step in range(3):
        assert f"  {step}    " in result.output


def test_machines_lists_bundled():
    result = runner.invoke(app, ["machines"])
    assert result.exit_code == 0
    for name in ("binary_increment", "blank_check", "increment", "reject"):
        assert name in result.output


@pytest.mark.parametrize(
    "args",
    [
        ["run", "increment", "1", "--limit", "-1"],
        ["run", "increment", "1", "--limit", "-5"],
        ["trace", "increment", "1", "--limit", "-1"],
        ["trace", "increment", "1", "--tail", "-1"],
    ],
)
def test_negative_counts_are_rejected(args: list[str]):
    result = runner.invoke(app, args)
    assert result.exit_code != 0
    assert not isinstance(result.exception, (IndexError, ValueError))
    assert "Traceback" not in result.output
