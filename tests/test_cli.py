"""Tests for the click CLI."""

import json
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from studybuddy.cli import main
from studybuddy.config import Config


@pytest.fixture
def runner(tmp_path):
    config = Config(data_dir=str(tmp_path))
    with patch("studybuddy.cli.load_config", return_value=config):
        yield CliRunner()


def test_add_and_list(runner):
    result = runner.invoke(main, ["add", "Essay", "-t", "90", "--due", "2025-01-15", "--difficulty", "Hard"])
    assert result.exit_code == 0
    assert "Added task 1: Essay" in result.output

    result = runner.invoke(main, ["tasks", "--json"])
    data = json.loads(result.output)
    assert data[0]["title"] == "Essay"
    assert data[0]["difficulty"] == "Hard"


def test_add_rejects_blocked_words(runner):
    result = runner.invoke(main, ["add", "Scam notes", "-t", "30"])
    assert result.exit_code == 1
    assert "inappropriate" in result.output


def test_done_and_progress(runner):
    runner.invoke(main, ["add", "Essay", "-t", "30"])
    result = runner.invoke(main, ["done", "1"])
    assert result.exit_code == 0
    assert "15 XP" in result.output

    result = runner.invoke(main, ["progress", "--json"])
    assert json.loads(result.output)["completedTasks"] == 1


def test_done_missing_task(runner):
    result = runner.invoke(main, ["done", "42"])
    assert result.exit_code == 1
    assert "not found" in result.output


def test_schedule_generate_offline(runner):
    runner.invoke(main, ["add", "Essay", "-t", "180", "--difficulty", "Hard"])
    runner.invoke(main, ["add", "Vocab", "-t", "30", "--difficulty", "Easy"])

    result = runner.invoke(main, ["schedule", "generate", "--offline"])

    assert result.exit_code == 0
    assert "09:00-11:00  Essay" in result.output
    assert "11:00-11:15  Break" in result.output
    assert "11:15-11:45  Vocab" in result.output


def test_schedule_generate_without_tasks(runner):
    result = runner.invoke(main, ["schedule", "generate", "--offline"])
    assert result.exit_code == 1
    assert "No tasks available" in result.output


def test_schedule_show_empty(runner):
    result = runner.invoke(main, ["schedule"])
    assert "No active schedule" in result.output


def test_corrupt_data_file(runner, tmp_path):
    (tmp_path / "tasks.json").write_text("{not json")

    result = runner.invoke(main, ["tasks"])

    assert result.exit_code == 1
    assert "Error: Corrupt data file" in result.output
    assert result.exception is None or isinstance(result.exception, SystemExit)
