"""Shared fixtures: every test gets its own store file under tmp_path."""
from pathlib import Path

import pytest

from storage import LocalStorage
from task_store import TaskStore


@pytest.fixture()
def store_file(tmp_path: Path) -> Path:
    return tmp_path / "storage.json"


@pytest.fixture()
def storage(store_file: Path) -> LocalStorage:
    return LocalStorage(store_file)


@pytest.fixture()
def store(storage: LocalStorage) -> TaskStore:
    s = TaskStore(storage)
    s.load()
    return s


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path: Path):
    """Keep real TASKLIST_* variables and any .env in the cwd out of tests."""
    for name in ("STORE_FILE", "STORAGE_KEY", "DEFAULT_DEADLINE", "LOG_DIR", "LOG_LEVEL", "ALT_SCREEN"):
        monkeypatch.delenv(f"TASKLIST_{name}", raising=False)
    monkeypatch.chdir(tmp_path)
