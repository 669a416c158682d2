"""Task store: holds the task list, mirrors it to storage, sorts and filters.

Two lists are kept:
    full list -> canonical order, always identical to what is persisted
    view      -> full list narrowed by the active state filter (if any)

Every mutation (create, delete, sort) rewrites the full list to storage and
re-derives the view. Filtering only changes the view and never writes.
Each filter applies to the full list, so filters do not stack.
"""
from __future__ import annotations
from datetime import date
import json
import logging
from typing import Dict, List, Optional

from errors import EmptyTitleError, IndexOutOfRange, StorageReadError, UnknownTaskError
from models import STATES, DeadlineLike, Task, check_state, parse_deadline
from storage import LocalStorage

logger = logging.getLogger(__name__)

DEFAULT_KEY = 'tasks'


def decode_tasks(raw: Optional[str]) -> List[Task]:
    """Parse the persisted text into tasks. Missing key -> empty list."""
    if raw is None:
        return []
    try:
        data = json.loads(raw)
    except ValueError as exc:
        raise StorageReadError(f"Task list is not valid JSON: {exc}") from exc
    if data is None:
        return []
    if not isinstance(data, list):
        raise StorageReadError(f"Task list is a {type(data).__name__}, expected a list")
    return [Task.from_dict(entry) for entry in data]


def encode_tasks(tasks: List[Task]) -> str:
    return json.dumps([t.to_dict() for t in tasks])


def lacks_ids(raw: str) -> bool:
    """True if any persisted entry had no id (one was generated on decode)."""
    return any(not isinstance(e.get('id'), str) or not e['id'] for e in json.loads(raw))


class TaskStore:
    def __init__(self, storage: LocalStorage, key: str = DEFAULT_KEY):
        self.storage = storage
        self.key = key
        self._tasks: List[Task] = []
        self._view: List[Task] = []
        self._filter: Optional[str] = None

    # -------------------- lifecycle --------------------
    def load(self) -> List[Task]:
        """Replace in-memory state with the persisted list.

        Malformed or unreadable data is logged and treated as no tasks;
        this never raises.
        """
        try:
            raw = self.storage.get_item(self.key)
            tasks = decode_tasks(raw)
        except StorageReadError as exc:
            logger.error("Failed to load tasks: %s", exc)
            raw, tasks = None, []
        self._tasks = tasks
        if tasks and lacks_ids(raw):
            # pin generated ids so they stay stable across runs
            try:
                self.save()
            except OSError as exc:
                logger.error("Could not persist generated task ids: %s", exc)
            else:
                logger.info("Assigned ids to legacy tasks in %s[%s]", self.storage.path, self.key)
        self._filter = None
        self._refresh_view()
        logger.debug("Loaded %d task(s) from %s[%s]", len(tasks), self.storage.path, self.key)
        return list(self._tasks)

    def save(self, tasks: Optional[List[Task]] = None) -> None:
        """Overwrite the persisted list (defaults to the full in-memory list)."""
        to_save = self._tasks if tasks is None else tasks
        self.storage.set_item(self.key, encode_tasks(to_save))

    def _commit(self) -> None:
        self.save()
        self._refresh_view()

    def _refresh_view(self) -> None:
        if self._filter is None:
            self._view = list(self._tasks)
        else:
            self._view = [t for t in self._tasks if t.state == self._filter]

    # -------------------- queries --------------------
    @property
    def tasks(self) -> List[Task]:
        """Current view (filtered projection of the full list)."""
        return list(self._view)

    @property
    def all_tasks(self) -> List[Task]:
        return list(self._tasks)

    @property
    def active_filter(self) -> Optional[str]:
        return self._filter

    def counts(self) -> Dict[str, int]:
        counts = {s: 0 for s in STATES}
        for t in self._tasks:
            counts[t.state] += 1
        return counts

    def __len__(self) -> int:
        return len(self._view)

    # -------------------- task operations --------------------
    def create(self, title: str, summary: str = "", state: Optional[str] = None,
               deadline: DeadlineLike = None) -> Task:
        if not title or not title.strip():
            raise EmptyTitleError("Title required.")
        task = Task(
            title=title,
            summary=summary or "",
            state=check_state(state),
            deadline=parse_deadline(deadline),
        )
        self._tasks.append(task)
        self._commit()
        logger.info("Created task %s %r", task.id, task.title)
        return task

    def delete(self, index: int) -> Task:
        """Remove the task at `index` in the current view."""
        if index < 0 or index >= len(self._view):
            raise IndexOutOfRange(index, len(self._view))
        return self.delete_by_id(self._view[index].id)

    def delete_by_id(self, task_id: str) -> Task:
        for pos, task in enumerate(self._tasks):
            if task.id == task_id:
                del self._tasks[pos]
                self._commit()
                logger.info("Deleted task %s %r", task.id, task.title)
                return task
        raise UnknownTaskError(task_id)

    # -------------------- ordering --------------------
    def sort_by_state(self, target: str) -> List[Task]:
        """Stable sort: tasks in `target` state first, others keep relative order."""
        target = check_state(target)
        self._tasks.sort(key=lambda t: t.state != target)
        self._commit()
        logger.debug("Sorted by state %r", target)
        return self.tasks

    def sort_by_deadline(self) -> List[Task]:
        """Stable ascending sort by deadline; tasks without one go last."""
        self._tasks.sort(key=lambda t: (t.deadline is None, t.deadline or date.min))
        self._commit()
        logger.debug("Sorted by deadline")
        return self.tasks

    def filter_by_state(self, target: Optional[str]) -> List[Task]:
        """Narrow the view to `target`; None reloads the persisted full list."""
        if target is None:
            return self.load()
        self._filter = check_state(target)
        self._refresh_view()
        logger.debug("Filter %r -> %d task(s)", self._filter, len(self._view))
        return self.tasks

    def __str__(self) -> str:
        counts = self.counts()
        return ', '.join(f'{s}: {counts[s]}' for s in STATES)
