"""Settings loaded from environment variables (+ optional .env file).

Priority: real environment variable > .env entry > default. The .env file
is read from the current working directory via python-dotenv and never
overrides variables already set.
"""
from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

ENV_PREFIX = "TASKLIST"
DATA_DIR = Path("~/.local/share/tasklist").expanduser()
DEFAULT_DEADLINE = "2024-12-25"


def _k(suffix: str) -> str:
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str) -> Optional[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    return raw.strip()


def _env_path(name: str, default: Path) -> Path:
    raw = _env(name)
    return default if raw is None else Path(raw).expanduser()


def _env_bool(name: str, default: bool) -> bool:
    raw = _env(name)
    if raw is None:
        return default
    return raw.lower() not in {"0", "false", "no", "off"}


def _env_level(name: str, default: int) -> int:
    raw = _env(name)
    if raw is None:
        return default
    if raw.isdigit():
        return int(raw)
    level = logging.getLevelName(raw.upper())
    return level if isinstance(level, int) else default


def _env_date(name: str, default: str) -> str:
    raw = _env(name)
    if raw is None:
        return default
    try:
        date.fromisoformat(raw)
    except ValueError:
        return default
    return raw


@dataclass(frozen=True)
class Settings:
    store_file: Path
    storage_key: str
    default_deadline: str
    log_dir: Path
    log_level: int
    alt_screen: bool


def load_settings(dotenv: bool = True) -> Settings:
    if dotenv:
        load_dotenv(Path.cwd() / ".env", override=False)
    return Settings(
        store_file=_env_path(_k("STORE_FILE"), DATA_DIR / "storage.json"),
        storage_key=_env(_k("STORAGE_KEY")) or "tasks",
        default_deadline=_env_date(_k("DEFAULT_DEADLINE"), DEFAULT_DEADLINE),
        log_dir=_env_path(_k("LOG_DIR"), DATA_DIR / "logs"),
        log_level=_env_level(_k("LOG_LEVEL"), logging.WARNING),
        alt_screen=_env_bool(_k("ALT_SCREEN"), True),
    )
