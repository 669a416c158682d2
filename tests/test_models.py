"""Tests for Task (de)serialization and deadline parsing."""
from datetime import date, datetime

import pytest

from errors import InvalidDeadlineError, InvalidStateError, StorageReadError
from models import DEFAULT_STATE, DOING, DONE, NOT_DONE, Task, check_state, parse_deadline


def test_task_defaults():
    task = Task(title="Write report")
    assert task.summary == ""
    assert task.state == NOT_DONE == DEFAULT_STATE
    assert task.deadline is None
    assert len(task.id) == 12


def test_ids_are_unique():
    assert len({Task(title="x").id for _ in range(50)}) == 50


@pytest.mark.parametrize("value, expected", [
    (None, None),
    ("", None),
    ("   ", None),
    ("2024-12-25", date(2024, 12, 25)),
    ("2024-12-25T00:00:00.000Z", date(2024, 12, 25)),
    ("2024-12-25T23:30:00+02:00", date(2024, 12, 25)),
    (date(2024, 1, 2), date(2024, 1, 2)),
    (datetime(2024, 1, 2, 15, 30), date(2024, 1, 2)),
])
def test_parse_deadline(value, expected):
    assert parse_deadline(value) == expected


@pytest.mark.parametrize("value", ["next tuesday", "2024-12-25garbage", "2024-12-25 xyz", "2024-13-01"])
def test_parse_deadline_rejects_garbage(value):
    with pytest.raises(InvalidDeadlineError):
        parse_deadline(value)


def test_check_state():
    assert check_state(None) == NOT_DONE
    assert check_state(DOING) == DOING
    with pytest.raises(InvalidStateError):
        check_state("done")


def test_to_dict_shape():
    task = Task(title="A", summary="s", state=DONE, deadline=date(2024, 12, 20), id="abc")
    assert task.to_dict() == {
        'id': 'abc',
        'title': 'A',
        'summary': 's',
        'state': 'Done',
        'deadline': '2024-12-20',
    }
    assert Task(title="B").to_dict()['deadline'] is None


def test_from_dict_fills_defaults_and_assigns_id():
    task = Task.from_dict({'title': 'Legacy'})
    assert task.summary == ""
    assert task.state == NOT_DONE
    assert task.deadline is None
    assert task.id


def test_from_dict_accepts_web_format():
    raw = {'title': 'A', 'summary': 'x', 'state': 'Doing right now', 'deadline': '2024-12-25T00:00:00.000Z'}
    task = Task.from_dict(raw)
    assert task.state == DOING
    assert task.deadline == date(2024, 12, 25)


def test_from_dict_drops_invalid_deadline(caplog):
    task = Task.from_dict({'title': 'A', 'deadline': 'soon'})
    assert task.deadline is None
    assert "Dropping invalid deadline" in caplog.text


@pytest.mark.parametrize("raw", [
    "not a dict",
    {'summary': 'no title'},
    {'title': 42},
    {'title': 'A', 'state': 'Finished'},
])
def test_from_dict_shape_mismatch(raw):
    with pytest.raises(StorageReadError):
        Task.from_dict(raw)
