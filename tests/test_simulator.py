"""
Command-Line Evaluator Tests

Runs the evaluator entry point on the state files and checks output
and exit codes.
"""

import sys
from pathlib import Path

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from simulator import EXIT_LOAD_ERROR, EXIT_SAFE, EXIT_UNSAFE, main


STATES_DIR = project_root / "tests" / "states"


def _path(name: str) -> str:
    return str(STATES_DIR / name)


def test_safe_state_output(capsys):
    """Matrices are displayed and the verdict is SAFE."""
    exit_code = main([_path("state-safe.txt")])
    output = capsys.readouterr().out

    assert exit_code == EXIT_SAFE
    assert "Claim matrix C" in output
    assert "Available vector V" in output
    assert "State is SAFE" in output


def test_sequence_option(capsys):
    """--sequence reports the completion order."""
    exit_code = main([_path("state-safe.txt"), "--sequence", "--quiet"])
    output = capsys.readouterr().out

    assert exit_code == EXIT_SAFE
    assert "Claim matrix" not in output, "--quiet hides the matrices"
    assert "Safe sequence: P1 -> P3 -> P0 -> P2 -> P4" in output


def test_unsafe_state(capsys):
    """Unsafe states exit with EXIT_UNSAFE and list blocked processes."""
    exit_code = main([_path("state-unsafe.txt"), "--sequence", "--quiet"])
    output = capsys.readouterr().out

    assert exit_code == EXIT_UNSAFE
    assert "State is UNSAFE" in output
    assert "Blocked processes: [P0, P1, P2, P3, P4]" in output


def test_load_error_continues_with_next_file(capsys):
    """A bad file is reported and the remaining files are still evaluated."""
    exit_code = main([_path("state-truncated.txt"), _path("state-single.txt"), "--quiet"])
    output = capsys.readouterr().out

    assert exit_code == EXIT_LOAD_ERROR
    assert "[ERROR] Failed to load state" in output
    assert "State is SAFE" in output


def test_capacity_option(capsys):
    """--max-processes lowers the accepted process count."""
    exit_code = main([_path("state-safe.txt"), "--max-processes", "4", "--quiet"])
    output = capsys.readouterr().out

    assert exit_code == EXIT_LOAD_ERROR
    assert "maximum exceeded" in output


def test_strict_option(tmp_path, capsys):
    """--strict rejects allocations above the claim."""
    state_file = tmp_path / "over.txt"
    state_file.write_text("1 1\n5\n1\n2\n", encoding="utf-8")

    assert main([str(state_file), "--quiet"]) == EXIT_SAFE
    assert main([str(state_file), "--quiet", "--strict"]) == EXIT_LOAD_ERROR
    assert "exceeds claim" in capsys.readouterr().out


def test_verbose_trace_and_log_file(tmp_path, capsys):
    """--verbose logs each completion; --log-file mirrors the output."""
    log_file = tmp_path / "eval.log"
    exit_code = main([_path("state-safe.txt"), "--verbose", "--quiet",
                      "--log-file", str(log_file)])
    output = capsys.readouterr().out

    assert exit_code == EXIT_SAFE
    assert "[DEBUG] Initial available: [3, 3, 2]" in output
    assert "[DEBUG] Step 1: P1 completes - available now [5, 3, 2]" in output
    assert "[DEBUG] Step 5: P4 completes - available now [10, 5, 7]" in output

    logged = log_file.read_text(encoding="utf-8")
    assert logged.startswith("State Evaluation Log")
    assert "State is SAFE" in logged


def test_requires_state_file():
    """At least one state file must be given."""
    with pytest.raises(SystemExit):
        main([])


def test_permissive_load_warns_about_negative_values(tmp_path, capsys):
    """Without --strict, allocation above claim is accepted with a warning."""
    state_file = tmp_path / "over.txt"
    state_file.write_text("1 1\n1\n1\n2\n", encoding="utf-8")

    assert main([str(state_file), "--quiet"]) == EXIT_SAFE
    output = capsys.readouterr().out
    assert "[WARNING] P0 allocation exceeds its claim (need [-1])" in output
    assert "[WARNING] Resources over-allocated (available [-1])" in output


def test_oversized_value_is_reported_not_raised(tmp_path, capsys):
    """A value beyond 64 bits is a load error; the next file still runs."""
    state_file = tmp_path / "huge.txt"
    state_file.write_text("1 1\n99999999999999999999\n1\n0\n", encoding="utf-8")

    exit_code = main([str(state_file), _path("state-single.txt"), "--quiet"])
    output = capsys.readouterr().out
    assert exit_code == EXIT_LOAD_ERROR
    assert "does not fit in 64 bits" in output
    assert "State is SAFE" in output
