"""Tests for logging configuration."""
import logging

import pytest

from logging_setup import _ConsoleNoiseFilter, setup_logging


@pytest.fixture()
def restore_root():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()
    for h in handlers:
        root.addHandler(h)
    root.setLevel(level)
    logging.captureWarnings(False)


def _record(name, level):
    return logging.LogRecord(name, level, __file__, 1, "msg", None, None)


def test_console_filter():
    f = _ConsoleNoiseFilter()
    assert f.filter(_record("task_store", logging.DEBUG))
    assert f.filter(_record("storage", logging.INFO))
    assert not f.filter(_record("urllib3.connectionpool", logging.WARNING))
    assert f.filter(_record("urllib3.connectionpool", logging.ERROR))


def test_setup_writes_log_file(tmp_path, restore_root):
    setup_logging(log_dir=tmp_path / "logs", console_level=logging.CRITICAL)
    logging.getLogger("task_store").debug("hello file")
    for h in restore_root.handlers:
        h.flush()
    assert "hello file" in (tmp_path / "logs" / "tasklist.log").read_text()


def test_setup_without_file(restore_root):
    setup_logging(log_dir=None)
    assert len(restore_root.handlers) == 1
    assert isinstance(restore_root.handlers[0], logging.StreamHandler)
