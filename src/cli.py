"""Command-line interface: one-shot click commands plus an interactive shell.

State arguments accept the stored names ("Done", "Not Done",
"Doing right now") or short aliases (d / nd / dn, done / not-done / doing).
Positions shown in listings are 1-based; the store itself is 0-based.
"""
from __future__ import annotations
import logging
import sys
from pathlib import Path
from typing import Optional

import click

from config import Settings, load_settings
from errors import IndexOutOfRange, TaskListError
from models import DOING, DONE, NOT_DONE, STATES
from storage import LocalStorage
from task_store import TaskStore
from view import render

logger = logging.getLogger(__name__)

STATE_ALIASES = {
    'd': DONE,
    'done': DONE,
    'nd': NOT_DONE,
    'not-done': NOT_DONE,
    'notdone': NOT_DONE,
    'not done': NOT_DONE,
    'dn': DOING,
    'doing': DOING,
    'doing right now': DOING,
}


def resolve_state(raw: str) -> Optional[str]:
    text = raw.strip()
    if text in STATES:
        return text
    return STATE_ALIASES.get(text.lower())


class StateType(click.ParamType):
    name = 'state'

    def convert(self, value, param, ctx):
        if value in STATES:
            return value
        state = resolve_state(str(value))
        if state is None:
            self.fail(f"{value!r} is not a state; use d/nd/dn or done/not-done/doing", param, ctx)
        return state


STATE = StateType()


class App:
    """Objects shared between commands (click context object)."""

    def __init__(self, settings: Settings, store: TaskStore):
        self.settings = settings
        self.store = store


# --- terminal control helpers ---
def _clear_screen() -> None:
    click.echo("\033[3J\033[H\033[2J\033[H", nl=False)


def _enter_alt_screen() -> None:
    click.echo("\033[?1049h", nl=False)


def _leave_alt_screen() -> None:
    click.echo("\033[?1049l", nl=False)


def _show(store: TaskStore) -> None:
    for line in render(store):
        click.echo(line)


# -------------------- one-shot commands --------------------
@click.group(invoke_without_command=True)
@click.option('--store-file', type=click.Path(dir_okay=False, path_type=Path),
              help='Key/value store file (default from TASKLIST_STORE_FILE).')
@click.option('--key', 'storage_key', help='Storage key holding the task list.')
@click.pass_context
def cli(ctx: click.Context, store_file: Optional[Path], storage_key: Optional[str]) -> None:
    """Task list: create, sort, filter and delete tasks."""
    settings = ctx.obj if isinstance(ctx.obj, Settings) else load_settings()
    store = TaskStore(LocalStorage(store_file or settings.store_file),
                      key=storage_key or settings.storage_key)
    store.load()
    ctx.obj = App(settings, store)
    if ctx.invoked_subcommand is None:
        ctx.invoke(shell)


@cli.command()
@click.argument('title', nargs=-1, required=True)
@click.option('-s', '--summary', default='', help='Optional summary text.')
@click.option('--state', type=STATE, default=NOT_DONE, show_default=True)
@click.option('--deadline', default=None, help='Deadline as YYYY-MM-DD.')
@click.pass_obj
def add(app: App, title, summary: str, state: str, deadline: Optional[str]) -> None:
    """Create a task."""
    try:
        task = app.store.create(' '.join(title), summary=summary, state=state, deadline=deadline)
    except TaskListError as exc:
        raise click.ClickException(str(exc))
    click.echo(f'Task "{task.title}" added ({len(app.store)}).')


@cli.command()
@click.argument('number', type=int, required=False)
@click.option('--id', 'task_id', help='Delete by task id instead of position.')
@click.pass_obj
def rm(app: App, number: Optional[int], task_id: Optional[str]) -> None:
    """Delete the task at position NUMBER (as shown by `ls`)."""
    if (number is None) == (task_id is None):
        raise click.UsageError("Give either a position or --id.")
    try:
        if task_id is not None:
            task = app.store.delete_by_id(task_id)
        else:
            task = app.store.delete(number - 1)
    except IndexOutOfRange:
        raise click.ClickException(f"No task #{number}.")
    except TaskListError as exc:
        raise click.ClickException(str(exc))
    click.echo(f'Task "{task.title}" removed.')


@cli.command('ls')
@click.option('--state', type=STATE, default=None, help='Only show tasks in this state.')
@click.pass_obj
def ls_(app: App, state: Optional[str]) -> None:
    """List tasks."""
    app.store.filter_by_state(state)
    _show(app.store)


@cli.group()
def sort() -> None:
    """Reorder the stored list."""


@sort.command('state')
@click.argument('target', type=STATE)
@click.pass_obj
def sort_state(app: App, target: str) -> None:
    """Put tasks in TARGET state first."""
    app.store.sort_by_state(target)
    _show(app.store)


@sort.command('deadline')
@click.pass_obj
def sort_deadline(app: App) -> None:
    """Order by deadline, tasks without one last."""
    app.store.sort_by_deadline()
    _show(app.store)


@cli.command()
@click.pass_obj
def shell(app: App) -> None:
    """Interactive shell (default when no command is given)."""
    use_tty = app.settings.alt_screen and sys.stdout.isatty()
    Shell(app.store, default_deadline=app.settings.default_deadline, alt_screen=use_tty).run()


# -------------------- interactive shell --------------------
class Shell:
    def __init__(self, store: TaskStore, default_deadline: str = '', alt_screen: bool = False):
        self.store = store
        self.default_deadline = default_deadline
        self.alt_screen = alt_screen
        self.message: Optional[str] = None

    def run(self) -> None:
        """REPL loop; list is redrawn every cycle.

        Every mutating command persists immediately, so exiting needs no
        extra save.
        """
        exit_message: Optional[str] = None
        if self.alt_screen:
            _enter_alt_screen()
        try:
            while True:
                if self.alt_screen:
                    _clear_screen()
                _show(self.store)
                if self.message:
                    click.echo(f"\n{self.message}")
                    self.message = None
                line = input("\n: ").strip()
                if not line:
                    continue
                if line.lower() in ('exit', 'quit', 'q'):
                    exit_message = "Goodbye."
                    break
                try:
                    self.handle(line)
                except TaskListError as exc:
                    logger.debug("Command %r failed: %s", line, exc)
                    self.message = str(exc)
        except (KeyboardInterrupt, EOFError, click.Abort):
            exit_message = "Interrupted. Goodbye."
        finally:
            if self.alt_screen:
                _leave_alt_screen()
            if exit_message:
                click.echo(exit_message)

    # -------------------- command dispatch --------------------
    def handle(self, line: str) -> None:
        tokens = line.split()
        cmd, args = tokens[0].lower(), tokens[1:]
        if cmd == 'add':
            self._cmd_add(args)
        elif cmd in ('rm', 'del', 'delete'):
            self._cmd_rm(args)
        elif cmd == 'sort':
            self._cmd_sort(args)
        elif cmd == 'filter':
            self._cmd_filter(args)
        elif cmd == 'clear':
            self.store.filter_by_state(None)
        elif cmd == 'help':
            self.message = self.help_text()
        else:
            self.message = "Unknown command. Type 'help' for instructions."

    def _cmd_add(self, args: list[str]) -> None:
        if args:
            self.store.create(' '.join(args))
            return
        title = click.prompt("Title", default='', show_default=False).strip()
        if not title:
            self.message = "Title required."
            return
        summary = click.prompt("Summary", default='', show_default=False)
        state = click.prompt("State (d/nd/dn)", type=STATE, default=NOT_DONE)
        deadline = click.prompt("Deadline (YYYY-MM-DD, '-' for none)", default=self.default_deadline)
        self.store.create(title, summary=summary, state=state,
                          deadline=None if deadline.strip() == '-' else deadline)

    def _cmd_rm(self, args: list[str]) -> None:
        if len(args) != 1 or not args[0].rstrip('.').isdigit():
            self.message = "Usage: rm <n>"
            return
        number = int(args[0].rstrip('.'))
        try:
            task = self.store.delete(number - 1)
        except IndexOutOfRange:
            self.message = f"No task #{number}."
            return
        self.message = f'Task "{task.title}" removed.'

    def _cmd_sort(self, args: list[str]) -> None:
        what = ' '.join(args)
        if what.lower() == 'deadline':
            self.store.sort_by_deadline()
            return
        state = resolve_state(what) if what else None
        if state is None:
            self.message = "Usage: sort done|doing|not-done|deadline"
            return
        self.store.sort_by_state(state)

    def _cmd_filter(self, args: list[str]) -> None:
        state = resolve_state(' '.join(args)) if args else None
        if state is None:
            self.message = "Usage: filter done|doing|not-done (use 'clear' to reset)"
            return
        self.store.filter_by_state(state)

    @staticmethod
    def help_text() -> str:
        return "\n".join([
            "Commands:",
            "  add                 Add a task (prompts for title, summary, state, deadline)",
            "  add <title...>      Shorthand add with inline title",
            "  rm <n>              Delete task number n",
            "  sort <state>        Show tasks in a state first (done / doing / not-done)",
            "  sort deadline       Order by deadline, tasks without one last",
            "  filter <state>      Only show tasks in a state",
            "  clear               Clear the filter",
            "  help                Show this help",
            "  exit                Quit",
        ])
