"""Tests for the click CLI."""

import json
from datetime import datetime
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from chronogrid.adapters.json_store import JsonFileStore
from chronogrid.cli import main
from chronogrid.config import Config
from chronogrid.core.events import Event, RecurrenceKind, RecurrenceRule
from chronogrid.core.tasks import Task


# Fixtures
@pytest.fixture
def config(tmp_path):
    return Config(data_file=str(tmp_path / "calendar.json"))


@pytest.fixture
def store(config):
    store = JsonFileStore(config.data_path())
    store.create_event(
        Event(
            id="standup",
            title="Standup",
            start=datetime(2024, 1, 1, 9),
            end=datetime(2024, 1, 1, 10),
            recurrence=RecurrenceRule(kind=RecurrenceKind.WEEKLY, count=3),
        )
    )
    store.create_event(
        Event(id="review", title="Review", start=datetime(2024, 1, 1, 9, 30), end=datetime(2024, 1, 1, 11))
    )
    store.create_task(Task(id="report", title="Report", due=datetime(2000, 1, 1)))
    return store


@pytest.fixture
def run(config, store):
    runner = CliRunner()

    def _run(*args: str):
        with patch("chronogrid.cli.load_config", return_value=config):
            return runner.invoke(main, list(args))

    return _run


class TestDay:
    def test_text(self, run):
        result = run("day", "--date", "2024-01-01")

        assert result.exit_code == 0
        assert "## Monday, January 01" in result.output
        assert "- 09:00-10:00 Standup [col 1/2]" in result.output
        assert "- 09:30-11:00 Review [col 2/2]" in result.output

    def test_json(self, run):
        result = run("day", "--date", "2024-01-08", "--json")

        data = json.loads(result.output)
        assert data["date"] == "2024-01-08"
        assert [e["id"] for e in data["events"]] == ["standup:1"]
        assert data["events"][0]["top"] == 576
        assert data["events"][0]["columns"] == 1

    def test_empty_day(self, run):
        result = run("day", "--date", "2024-03-01")
        assert "No events." in result.output


def test_week(run):
    result = run("week", "--date", "2024-01-10", "--json")

    days = json.loads(result.output)
    assert [d["date"] for d in days][0] == "2024-01-08"
    assert len(days) == 7
    assert [e["id"] for e in days[0]["events"]] == ["standup:1"]


def test_expand(run):
    result = run("expand", "standup")

    assert result.exit_code == 0
    lines = result.output.strip().splitlines()
    assert len(lines) == 3
    assert lines[2].startswith("Mon 2024-01-15 09:00-10:00  Standup")


def test_expand_unknown_event(run):
    result = run("expand", "nope")

    assert result.exit_code == 1
    assert "Error:" in result.output


def test_overdue(run):
    result = run("overdue", "--json")

    data = json.loads(result.output)
    assert data == [
        {"id": "report", "title": "Report", "status": "hard-overdue", "days": data[0]["days"], "missing_due": False}
    ]

    text = run("overdue").output
    assert "HARD OVERDUE" in text
    assert "0 on time, 0 soft overdue, 1 hard overdue" in text


def test_move(run, store):
    result = run("move", "review", "2024-01-02T14:00")

    assert result.exit_code == 0
    assert "Moved Review to 2024-01-02 14:00-15:30" in result.output
    assert store.get_event("review").start == datetime(2024, 1, 2, 14)


def test_move_rejects_bad_time(run):
    result = run("move", "review", "tomorrow")
    assert result.exit_code == 2


@patch("chronogrid.cli.BlockingScheduler")
def test_watch_schedules_refresh(mock_scheduler_cls, run):
    scheduler = MagicMock()
    mock_scheduler_cls.return_value = scheduler

    result = run("watch")

    assert result.exit_code == 0
    scheduler.add_job.assert_called_once()
    trigger = scheduler.add_job.call_args.args[1]
    assert trigger.interval.total_seconds() == 60
    scheduler.start.assert_called_once()
