"""Tests for the shell step runner."""

import logging

import pytest

from jdkup.errors import ExtractionError
from jdkup.runtime.shell import run_sequence


def test_runs_in_order(tmp_path):
    out = tmp_path / "out.txt"
    run_sequence([
        ("", f"echo one >> {out}"),
        ("", f"echo two >> {out}"),
    ])
    assert out.read_text().split() == ["one", "two"]


def test_stops_at_first_failure(tmp_path):
    marker = tmp_path / "marker"
    with pytest.raises(ExtractionError) as exc_info:
        run_sequence([
            ("", "true"),
            ("", "exit 3"),
            ("", f"touch {marker}"),
        ])
    assert not marker.exists()
    assert exc_info.value.command == "exit 3"
    assert "'exit 3' failed" in str(exc_info.value)
    assert "exit status 3" in str(exc_info.value)


def test_failure_output_is_logged(caplog):
    with caplog.at_level(logging.DEBUG, logger="jdkup.runtime.shell"):
        with pytest.raises(ExtractionError) as exc_info:
            run_sequence([("Doing things", "echo oops; echo more >&2; exit 1")])
    assert "oops" in exc_info.value.output
    assert "more" in exc_info.value.output
    assert any(r.levelno == logging.INFO and r.getMessage() == "Doing things" for r in caplog.records)
    assert any(r.levelno == logging.ERROR and "oops" in r.getMessage() for r in caplog.records)
