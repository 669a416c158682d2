"""Rendering: turns the store's current view into printable lines.

Pure projection of TaskStore state; nothing here mutates the store.
Numbers shown are 1-based positions in the current view (what `rm <n>`
takes) and each card carries the task id (what `rm --id` takes).
"""
from typing import List, Optional
import shutil
import textwrap

import click

from models import STATES, Task
from task_store import TaskStore

MIN_WIDTH = 30
EMPTY_TEXT = "You have no tasks"
NO_SUMMARY = "No summary provided"


def _wrap(text: str, width: int, indent: str) -> List[str]:
    return textwrap.wrap(text, width=max(MIN_WIDTH, width), initial_indent=indent,
                         subsequent_indent=indent) or [indent]


def render_task(number: int, task: Task, width: int) -> List[str]:
    prefix = f"{number}. "
    indent = ' ' * len(prefix)
    lines = _wrap(task.title or '<untitled>', width, indent)
    lines[0] = click.style(prefix, bold=True) + click.style(lines[0][len(indent):], bold=True)
    lines.extend(_wrap(task.summary or NO_SUMMARY, width, indent))
    lines.append(f"{indent}State: {task.state}")
    deadline = task.deadline.isoformat() if task.deadline else '-'
    lines.append(f"{indent}Deadline: {deadline}")
    lines.append(f"{indent}Id: {task.id}")
    return lines


def render_header(store: TaskStore) -> str:
    counts = store.counts()
    parts = [f"{s}: {counts[s]}" for s in STATES]
    header = "My Tasks (" + ", ".join(parts) + ")"
    if store.active_filter:
        header += f" [filter: {store.active_filter}]"
    return header


def render(store: TaskStore, width: Optional[int] = None) -> List[str]:
    if width is None:
        width = shutil.get_terminal_size((80, 24)).columns
    lines = [render_header(store), '-' * min(width, 60)]
    tasks = store.tasks
    if not tasks:
        lines.append(EMPTY_TEXT)
        return lines
    for number, task in enumerate(tasks, start=1):
        lines.extend(render_task(number, task, width))
        lines.append('')
    return lines[:-1]
