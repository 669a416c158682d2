"""Logging configuration: filtered console handler + full file log."""
from __future__ import annotations
import logging
import sys
from pathlib import Path
from typing import Union

APP_LOGGERS = ("models", "storage", "task_store", "config", "cli", "view", "main", "logging_setup")

logger = logging.getLogger(__name__)


class _ConsoleNoiseFilter(logging.Filter):
    """Keep our own records; third-party records only at ERROR+."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name.split('.', 1)[0] in APP_LOGGERS:
            return True
        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: Union[str, Path, None] = None,
    console_level: int = logging.WARNING,
    file_level: int = logging.DEBUG,
) -> None:
    """Install handlers on the root logger. Call once, early.

    log_dir=None skips the file handler.
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(console_level)
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleNoiseFilter())
    root.addHandler(ch)

    if log_dir is not None:
        log_dir = Path(log_dir)
        try:
            log_dir.mkdir(parents=True, exist_ok=True)
            fh = logging.FileHandler(str(log_dir / "tasklist.log"), encoding="utf-8")
        except OSError as exc:
            logger.warning("File logging disabled: %s", exc)
        else:
            fh.setLevel(file_level)
            fh.setFormatter(fmt)
            root.addHandler(fh)

    logging.captureWarnings(True)
