"""Tests for the file-backed key/value store."""
import json

import pytest

from errors import StorageReadError
from storage import LocalStorage


def test_missing_file_reads_empty(storage):
    assert storage.get_item("tasks") is None
    assert storage.keys() == []


def test_set_get_and_remove(storage, store_file):
    storage.set_item("tasks", "[]")
    storage.set_item("other", "x")
    assert storage.get_item("tasks") == "[]"
    assert sorted(storage.keys()) == ["other", "tasks"]
    assert json.loads(store_file.read_text()) == {"tasks": "[]", "other": "x"}

    storage.remove_item("other")
    assert storage.keys() == ["tasks"]
    storage.remove_item("missing")
    assert storage.keys() == ["tasks"]


def test_creates_parent_directories(tmp_path):
    nested = LocalStorage(tmp_path / "a" / "b" / "storage.json")
    nested.set_item("k", "v")
    assert nested.get_item("k") == "v"


def test_no_temp_files_left_behind(storage, store_file):
    storage.set_item("k", "v1")
    storage.set_item("k", "v2")
    assert [p.name for p in store_file.parent.iterdir()] == [store_file.name]


@pytest.mark.parametrize("content", ["{not json", "[1, 2, 3]", '"text"'])
def test_corrupt_file_raises_on_read(store_file, content):
    store_file.write_text(content)
    with pytest.raises(StorageReadError):
        LocalStorage(store_file).get_item("tasks")


def test_corrupt_file_is_rewritten_on_write(store_file, caplog):
    store_file.write_text("{not json")
    storage = LocalStorage(store_file)
    storage.set_item("tasks", "[]")
    assert storage.get_item("tasks") == "[]"
    assert "unreadable" in caplog.text


def test_non_string_value_raises_on_read(store_file):
    store_file.write_text(json.dumps({"tasks": [{"title": "A"}]}))
    with pytest.raises(StorageReadError):
        LocalStorage(store_file).get_item("tasks")


def test_write_keeps_non_string_values_of_other_keys(store_file):
    store_file.write_text(json.dumps({"tasks": "[]", "theme": {"x": 1}, "count": 3}))
    storage = LocalStorage(store_file)
    storage.set_item("tasks", "[1]")
    assert json.loads(store_file.read_text()) == {"tasks": "[1]", "theme": {"x": 1}, "count": 3}
    storage.remove_item("count")
    assert sorted(storage.keys()) == ["tasks", "theme"]
