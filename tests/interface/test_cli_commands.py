"""Tests for CLI commands: help, new-state, review, simulate, config, serve."""

import json
import logging
from unittest.mock import patch

from typer.testing import CliRunner

from flashdeck.domain.constants import MS_PER_DAY
from flashdeck.interface.cli import app

runner = CliRunner()


# --- Help ---


def test_cli_help():
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "flashdeck: SM-2 flashcard scheduling" in result.stdout
    assert "review" in result.stdout
    assert "simulate" in result.stdout


# --- Scheduler ---


def test_new_state_command():
    result = runner.invoke(app, ["new-state", "--now", "1000"])
    assert result.exit_code == 0
    assert json.loads(result.stdout) == {
        "easiness": 2.5,
        "interval": 0,
        "repetition": 0,
        "dueAt": 1000,
    }


def test_review_command_from_fresh_state():
    result = runner.invoke(app, ["review", "--quality", "5", "--now", "1000"])
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["interval"] == 1
    assert data["repetition"] == 1
    assert data["dueAt"] == 1000 + MS_PER_DAY
    assert abs(data["easiness"] - 2.6) < 1e-9


def test_review_command_with_state():
    result = runner.invoke(
        app,
        [
            "review",
            "-q",
            "2",
            "--easiness",
            "2.6",
            "--interval",
            "6",
            "--repetition",
            "2",
            "--due-at",
            "0",
            "--now",
            "3000",
        ],
    )
    assert result.exit_code == 0
    assert json.loads(result.stdout) == {
        "easiness": 2.6,
        "interval": 1,
        "repetition": 0,
        "dueAt": 3000 + MS_PER_DAY,
    }


def test_review_command_rejects_bad_quality():
    result = runner.invoke(app, ["review", "--quality", "7", "--now", "0"])
    assert result.exit_code == 2
    assert "0..5" in result.output


def test_simulate_command():
    result = runner.invoke(app, ["simulate", "5", "5", "5", "--start", "0"])
    assert result.exit_code == 0
    lines = result.stdout.strip().splitlines()
    assert lines[0].split() == ["day", "grade", "interval", "rep", "easiness"]
    assert lines[1].split() == ["0", "5", "1", "1", "2.60"]
    assert lines[2].split() == ["1", "5", "6", "2", "2.70"]
    assert lines[3].split() == ["7", "5", "16", "3", "2.80"]
    assert lines[-1] == "Next review on day 23."


def test_simulate_rejects_bad_grade():
    result = runner.invoke(app, ["simulate", "5", "9", "--start", "0"])
    assert result.exit_code == 2


# --- Config ---


def test_config_show_command(monkeypatch):
    monkeypatch.setenv("FLASHDECK_SESSION_LIMIT", "25")
    result = runner.invoke(app, ["config", "show"])

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["session_limit"] == 25
    assert data["port"] == 8787


# --- Server ---


@patch("uvicorn.run")
def test_serve_command(mock_run):
    result = runner.invoke(app, ["serve", "--port", "9000"])
    assert result.exit_code == 0
    mock_run.assert_called_with("flashdeck.server:app", host="127.0.0.1", port=9000, reload=False)


@patch("uvicorn.run")
def test_serve_command_uses_config(mock_run, monkeypatch):
    monkeypatch.setenv("FLASHDECK_HOST", "0.0.0.0")
    result = runner.invoke(app, ["serve"])
    assert result.exit_code == 0
    mock_run.assert_called_with("flashdeck.server:app", host="0.0.0.0", port=8787, reload=False)


# --- Verbosity ---


def test_default_verbosity_logs_info():
    result = runner.invoke(app, ["new-state", "--now", "0"])
    assert result.exit_code == 0
    assert logging.getLogger("flashdeck").level == logging.INFO


def test_verbose_flag_raises_to_debug():
    result = runner.invoke(app, ["-v", "new-state", "--now", "0"])
    assert result.exit_code == 0
    assert logging.getLogger("flashdeck").level == logging.DEBUG


def test_verbose_zero_from_env_logs_warnings(monkeypatch):
    monkeypatch.setenv("FLASHDECK_VERBOSE", "0")
    result = runner.invoke(app, ["new-state", "--now", "0"])
    assert result.exit_code == 0
    assert logging.getLogger("flashdeck").level == logging.WARNING
