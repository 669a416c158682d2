"""Data models for the task list application.

Exposes the Task dataclass plus the three state values. State strings are
stored verbatim ("Done", "Not Done", "Doing right now") so the persisted
list stays readable and compatible with lists written by the web version.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, Mapping, Optional, Tuple, Union
import logging
import uuid

from errors import InvalidDeadlineError, InvalidStateError, StorageReadError

logger = logging.getLogger(__name__)

DONE = "Done"
NOT_DONE = "Not Done"
DOING = "Doing right now"
STATES: Tuple[str, ...] = (DONE, NOT_DONE, DOING)
DEFAULT_STATE = NOT_DONE

DeadlineLike = Union[date, str, None]


def new_id() -> str:
    return uuid.uuid4().hex[:12]


def check_state(state: Optional[str]) -> str:
    """Return a valid state, mapping None to the default."""
    if state is None:
        return DEFAULT_STATE
    if state not in STATES:
        raise InvalidStateError(f"Unknown state: {state!r} (expected one of {', '.join(STATES)})")
    return state


def parse_deadline(value: DeadlineLike) -> Optional[date]:
    """Coerce a stored or user supplied deadline into a date.

    Accepts date/datetime objects, "YYYY-MM-DD" and full ISO timestamps
    (e.g. "2024-12-25T00:00:00.000Z" as produced by a JS Date). Empty
    values mean no deadline. Raises InvalidDeadlineError otherwise.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    if text.endswith('Z'):
        text = text[:-1] + '+00:00'
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        raise InvalidDeadlineError(f"Invalid deadline: {value!r} (expected YYYY-MM-DD)") from None


def format_deadline(deadline: Optional[date]) -> Optional[str]:
    return deadline.isoformat() if deadline else None


@dataclass
class Task:
    """A single task.

    Fields:
        title: Required, non-empty title.
        summary: Free text, may be empty.
        state: One of STATES.
        deadline: Due date, None when unset or unparseable.
        id: Generated identifier, stable across sorts and filters.
    """
    title: str
    summary: str = ""
    state: str = DEFAULT_STATE
    deadline: Optional[date] = None
    id: str = field(default_factory=new_id)

    # -------------------- serialization --------------------
    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'title': self.title,
            'summary': self.summary,
            'state': self.state,
            'deadline': format_deadline(self.deadline),
        }

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "Task":
        """Build a Task from persisted data.

        Shape problems (non-string title, unknown state) raise
        StorageReadError; a bad deadline only drops the deadline.
        """
        if not isinstance(raw, Mapping):
            raise StorageReadError(f"Task entry is not an object: {raw!r}")
        title = raw.get('title')
        if not isinstance(title, str):
            raise StorageReadError(f"Task entry has no title: {raw!r}")
        state = raw.get('state') or DEFAULT_STATE
        if state not in STATES:
            raise StorageReadError(f"Task {title!r} has unknown state {state!r}")
        summary = raw.get('summary')
        try:
            deadline = parse_deadline(raw.get('deadline'))
        except ValueError:
            logger.warning("Dropping invalid deadline %r on task %r", raw.get('deadline'), title)
            deadline = None
        tid = raw.get('id')
        return cls(
            title=title,
            summary=summary if isinstance(summary, str) else "",
            state=state,
            deadline=deadline,
            id=tid if isinstance(tid, str) and tid else new_id(),
        )

    def __repr__(self) -> str:  # pragma: no cover - convenience only
        return f"Task(id={self.id}, title={self.title}, state={self.state}, deadline={self.deadline})"
