"""Persistence helpers: a small file-backed key-value store.

The store file is a JSON object mapping keys to string values, mirroring
browser localStorage semantics (values are opaque serialized text). The
task list lives under a single key; see task_store.TaskStore.

Writes go through a temp file + os.replace so a crash never leaves a
half-written store behind.
"""
from __future__ import annotations
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from errors import StorageReadError

logger = logging.getLogger(__name__)


class LocalStorage:
    def __init__(self, path: Union[str, Path]):
        self.path = Path(path).expanduser()

    # -------------------- reading --------------------
    def _read_all(self) -> Dict[str, Any]:
        """Return the whole key/value mapping.

        Missing file -> empty mapping. Unreadable or non-object content
        raises StorageReadError.
        """
        if not self.path.exists():
            return {}
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            raise StorageReadError(f"Cannot read {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise StorageReadError(f"{self.path} does not hold a key/value object")
        return data

    def get_item(self, key: str) -> Optional[str]:
        """Value stored under `key`; a non-string value raises StorageReadError."""
        value = self._read_all().get(key)
        if value is not None and not isinstance(value, str):
            raise StorageReadError(f"Value under {key!r} is a {type(value).__name__}, expected serialized text")
        return value

    def keys(self) -> List[str]:
        return list(self._read_all())

    # -------------------- writing --------------------
    def set_item(self, key: str, value: str) -> None:
        try:
            data = self._read_all()
        except StorageReadError:
            logger.warning("Store file %s is unreadable; rewriting it from scratch", self.path)
            data = {}
        data[key] = value
        self._write_all(data)

    def remove_item(self, key: str) -> None:
        data = self._read_all()
        if key in data:
            del data[key]
            self._write_all(data)

    def _write_all(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(prefix='.storage-', suffix='.json', dir=str(self.path.parent))
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=4)
            os.replace(tmp, self.path)
        except BaseException:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise
        logger.debug("Wrote %d key(s) to %s", len(data), self.path)
