# src/task_tracker/cli/commands.py

from __future__ import annotations

import inspect
import logging
import shlex
from collections.abc import Callable
from datetime import datetime, timedelta
from typing import cast

from ..core.ports import TaskFilter
from ..core.state import AppState
from ..tasks import task_api
from ..tasks.store_base import StoreError
from ..tasks.task_filters import (
    DueDateRangeFilter,
    OverdueFilter,
    PriorityFilter,
    ProjectFilter,
    StatusFilter,
    apply_filters,
)
from ..tasks.task_models import Project, Task, TaskStatus
from ..tasks.task_reminders import dispatch_due_reminders
from .bootstrap import build_exporter

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandFailed(Exception):
    """A command was used wrongly or its target does not exist; the message is the reply."""


class CommandRegistry:
    """Simple slash-command registry used by the console loop and one-shot CLI."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        reply, _ok = self.run(state, line, emit)
        return reply

    def run(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> tuple[str | None, bool]:
        """
        Like handle(), but also reports whether the command succeeded.

        Bad input and storage faults come back as a message with ok=False,
        not an exception.
        """
        if not line.startswith("/"):
            return None, False

        try:
            parts = shlex.split(line[1:])
        except ValueError as e:
            return f"Cannot parse command: {e}", False
        if not parts:
            return "Empty command. Use /help to list available commands.", False

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands.", False

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        try:
            if nparams >= 3:
                h3 = cast(CommandHandler3, handler)
                return h3(state, args, emit), True
            h2 = cast(CommandHandler2, handler)
            return h2(state, args), True
        except CommandFailed as e:
            return str(e), False
        except StoreError as e:
            logger.error("Storage error in /%s: %s", name, e)
            return f"Storage error: {e}", False
        except (ValueError, TypeError, AttributeError, OverflowError) as e:
            return f"Error: {e}", False

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- argument helpers ----


def _split_options(args: list[str], known: set[str]) -> tuple[list[str], dict[str, str]]:
    """Split `key=value` tokens with a known key from the positional ones."""
    positional: list[str] = []
    options: dict[str, str] = {}
    for a in args:
        key, sep, value = a.partition("=")
        if sep and key.lower() in known:
            options[key.lower()] = value
        else:
            positional.append(a)
    return positional, options


def _parse_when(raw: str) -> datetime | None:
    """ISO date or datetime; "none" clears the value."""
    if raw.strip().lower() in ("", "none", "-"):
        return None
    try:
        return datetime.fromisoformat(raw.strip())
    except ValueError:
        raise ValueError(f"Bad date {raw!r}; use YYYY-MM-DD or YYYY-MM-DDTHH:MM") from None


def _fmt_task(t: Task) -> str:
    checkbox = "[x]" if t.status == TaskStatus.DONE else "[ ]"
    line = f"{checkbox} {t.id}  ({t.priority.value}) {t.title}  project={t.project_id} status={t.status.value}"
    if t.due_date is not None:
        line += f" due={t.due_date.strftime('%Y-%m-%d %H:%M')}"
    if t.is_overdue():
        line += " OVERDUE"
    return line


_FILTER_KEYS = {"status", "priority", "project", "from", "to"}


def _build_filters(positional: list[str], options: dict[str, str]) -> list[TaskFilter]:
    filters: list[TaskFilter] = []
    if "status" in options:
        filters.append(StatusFilter(options["status"].lower()))
    if "priority" in options:
        filters.append(PriorityFilter(options["priority"].lower()))
    if "project" in options:
        filters.append(ProjectFilter(options["project"]))
    if "overdue" in (p.lower() for p in positional):
        filters.append(OverdueFilter())
    if "from" in options or "to" in options:
        start = _parse_when(options.get("from", "")) or datetime.min
        end = _parse_when(options.get("to", "")) or datetime.max
        filters.append(DueDateRangeFilter(start, end))
    return filters


# ---- commands ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    settings = state.settings
    storage = getattr(settings, "storage", "?")
    where = ""
    if storage == "file":
        where = f" ({getattr(settings, 'tasks_file_path', '?')})"
    channels = ", ".join(getattr(settings, "notifiers", []) or []) or "none"
    tasks = state.tasks.find_all()
    open_n = sum(1 for t in tasks if t.status != TaskStatus.DONE)
    return (
        "Status:\n"
        f"  Storage: {storage}{where}\n"
        f"  Notifiers: {channels}\n"
        f"  Projects: {len(state.projects.find_all())}\n"
        f"  Tasks: {len(tasks)} ({open_n} open)"
    )


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add <id> <project_id> <title...> [priority=low|medium|high] [due=YYYY-MM-DD] [desc="..."]
    """
    positional, opts = _split_options(args, {"priority", "due", "desc"})
    if len(positional) < 3:
        raise CommandFailed("Usage: /add <id> <project_id> <title...> [priority=..] [due=YYYY-MM-DD] [desc=...]")

    task_id, project_id = positional[0], positional[1]
    if state.tasks.find_by_id(task_id) is not None:
        raise CommandFailed(f"Task {task_id} already exists. Use /edit to change it.")
    if state.projects.find_by_id(project_id) is None:
        logger.warning("Task %s refers to unknown project %s", task_id, project_id)

    task = task_api.create_task(
        state,
        task_id=task_id,
        project_id=project_id,
        title=" ".join(positional[2:]),
        description=opts.get("desc", ""),
        priority=opts.get("priority", "medium").lower(),
        due_date=_parse_when(opts.get("due", "")),
    )
    return f"Added: {_fmt_task(task)}"


def cmd_list(state: AppState, args: list[str]) -> str:
    """
    /list [status=..] [priority=..] [project=..] [overdue] [from=DATE] [to=DATE]
    """
    positional, opts = _split_options(args, _FILTER_KEYS)
    tasks = apply_filters(state.tasks.find_all(), _build_filters(positional, opts))
    if not tasks:
        return "No tasks."
    tasks.sort(key=lambda t: (t.created_at, t.id))
    return "\n".join(_fmt_task(t) for t in tasks)


def cmd_show(state: AppState, args: list[str]) -> str:
    if not args:
        raise CommandFailed("Usage: /show <id>")
    t = state.tasks.find_by_id(args[0])
    if t is None:
        raise CommandFailed(f"Task {args[0]} not found.")
    lines = [
        _fmt_task(t),
        f"  Description: {t.description or '-'}",
        f"  Created: {t.created_at.isoformat()}",
    ]
    if t.completed_at is not None:
        lines.append(f"  Completed: {t.completed_at.isoformat()}")
    return "\n".join(lines)


def cmd_edit(state: AppState, args: list[str]) -> str:
    """
    /edit <id> [title=..] [desc=..] [priority=..] [status=..] [due=DATE|none]
    """
    positional, opts = _split_options(args, {"title", "desc", "priority", "status", "due"})
    if len(positional) != 1 or not opts:
        raise CommandFailed("Usage: /edit <id> [title=..] [desc=..] [priority=..] [status=..] [due=DATE|none]")

    t = state.tasks.find_by_id(positional[0])
    if t is None:
        raise CommandFailed(f"Task {positional[0]} not found.")

    was_done = t.status == TaskStatus.DONE
    if "title" in opts:
        t.update_title(opts["title"])
    if "desc" in opts:
        t.update_description(opts["desc"])
    if "priority" in opts:
        t.update_priority(opts["priority"].lower())
    if "due" in opts:
        t.update_due_date(_parse_when(opts["due"]))
    if "status" in opts:
        t.update_status(opts["status"].lower())

    state.tasks.update(t)
    if not was_done and t.status == TaskStatus.DONE:
        state.notifier.notify_task_completed(t)
    return f"Updated: {_fmt_task(t)}"


def cmd_start(state: AppState, args: list[str]) -> str:
    if not args:
        raise CommandFailed("Usage: /start <id>")
    t = task_api.start_task(state, args[0])
    if t is None:
        raise CommandFailed(f"Task {args[0]} not found.")
    return f"Started: {_fmt_task(t)}"


def cmd_done(state: AppState, args: list[str]) -> str:
    if not args:
        raise CommandFailed("Usage: /done <id>")
    t = task_api.complete_task(state, args[0])
    if t is None:
        raise CommandFailed(f"Task {args[0]} not found.")
    return f"Done: {_fmt_task(t)}"


def cmd_rm(state: AppState, args: list[str]) -> str:
    if not args:
        raise CommandFailed("Usage: /rm <id>")
    if state.tasks.find_by_id(args[0]) is None:
        raise CommandFailed(f"Task {args[0]} not found.")
    state.tasks.delete(args[0])
    return f"Deleted task {args[0]}."


def cmd_export(state: AppState, args: list[str]) -> str:
    """
    /export <csv|json|md> [path] [filters as in /list]
    Without a path the export is printed.
    """
    positional, opts = _split_options(args, _FILTER_KEYS)
    if not positional:
        raise CommandFailed("Usage: /export <csv|json|md> [path] [status=..] [priority=..] [project=..] [overdue]")

    exporter = build_exporter(positional[0])
    rest = [p for p in positional[1:] if p.lower() != "overdue"]
    filters = _build_filters(positional[1:], opts)

    if rest:
        try:
            written = task_api.export_tasks(state, exporter, filters=filters, path=rest[0])
        except OSError as e:
            logger.error("Export to %s failed: %s", rest[0], e)
            raise CommandFailed(f"Cannot write export: {e}") from e
        return f"Exported to {written}"

    text = task_api.export_tasks(state, exporter, filters=filters)
    return str(text) if text else "(empty export)"


def cmd_project(state: AppState, args: list[str]) -> str:
    """
    /project add <id> <name...> [desc=..]
    /project list
    /project show <id>
    /project rename <id> <name...>
    /project rm <id>
    """
    usage = (
        "Usage:\n"
        "  /project add <id> <name...> [desc=..]\n"
        "  /project list\n"
        "  /project show <id>\n"
        "  /project rename <id> <name...>\n"
        "  /project rm <id>"
    )
    if not args:
        raise CommandFailed(usage)

    sub = args[0].lower()
    positional, opts = _split_options(args[1:], {"desc"})

    if sub == "add":
        if len(positional) < 2:
            raise CommandFailed(usage)
        project = Project(id=positional[0], name=" ".join(positional[1:]), description=opts.get("desc", ""))
        state.projects.save(project)
        return f"Project saved: {project.id} ({project.name})"

    if sub == "list":
        projects = sorted(state.projects.find_all(), key=lambda p: (p.created_at, p.id))
        if not projects:
            return "No projects."
        return "\n".join(f"{p.id}  {p.name}" for p in projects)

    if sub == "show":
        if not positional:
            raise CommandFailed(usage)
        p = state.projects.find_by_id(positional[0])
        if p is None:
            raise CommandFailed(f"Project {positional[0]} not found.")
        tasks = task_api.project_tasks(state, p.id)
        lines = [f"{p.id}  {p.name}", f"  Description: {p.description or '-'}", f"  Tasks: {len(tasks)}"]
        lines += [f"  {_fmt_task(t)}" for t in sorted(tasks, key=lambda t: (t.created_at, t.id))]
        return "\n".join(lines)

    if sub == "rename":
        if len(positional) < 2:
            raise CommandFailed(usage)
        p = state.projects.find_by_id(positional[0])
        if p is None:
            raise CommandFailed(f"Project {positional[0]} not found.")
        p.update_name(" ".join(positional[1:]))
        state.projects.update(p)
        return f"Project renamed: {p.id} ({p.name})"

    if sub in ("rm", "delete"):
        if not positional:
            raise CommandFailed(usage)
        if state.projects.find_by_id(positional[0]) is None:
            raise CommandFailed(f"Project {positional[0]} not found.")
        state.projects.delete(positional[0])
        left = len(task_api.project_tasks(state, positional[0]))
        note = f" ({left} tasks still reference it)" if left else ""
        return f"Deleted project {positional[0]}{note}."

    raise CommandFailed(usage)


# now + horizon must stay inside the datetime range.
_MAX_REMIND_HOURS = 24 * 365 * 100


def cmd_remind(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /remind [hours]  -> send due reminders for tasks due within the horizon
    """
    hours = getattr(state.settings, "due_soon_hours", 24)
    if args:
        try:
            hours = int(args[0])
        except ValueError:
            raise CommandFailed("Usage: /remind [hours]") from None
    if not 0 <= hours <= _MAX_REMIND_HOURS:
        raise CommandFailed(f"Hours must be between 0 and {_MAX_REMIND_HOURS}.")
    if emit:
        emit(f"Checking tasks due within {hours}h...")
    sent = dispatch_due_reminders(state.tasks, state.notifier, within=timedelta(hours=hours))
    return f"Sent {sent} reminder(s)."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show storage, notifiers and totals.")
registry.register("add", cmd_add, help_text="Add a task: /add <id> <project> <title> [priority=] [due=] [desc=].")
registry.register("list", cmd_list, help_text="List tasks: /list [status=] [priority=] [project=] [overdue].",
                  aliases=["ls"])
registry.register("show", cmd_show, help_text="Show one task: /show <id>.")
registry.register("edit", cmd_edit, help_text="Edit a task: /edit <id> title=.. desc=.. priority=.. due=..")
registry.register("start", cmd_start, help_text="Move a task to in_progress: /start <id>.")
registry.register("done", cmd_done, help_text="Complete a task: /done <id>.")
registry.register("rm", cmd_rm, help_text="Delete a task: /rm <id>.", aliases=["delete"])
registry.register("export", cmd_export, help_text="Export tasks: /export <csv|json|md> [path].")
registry.register("project", cmd_project, help_text="Projects: /project add|list|show|rename|rm.")
registry.register("remind", cmd_remind, help_text="Send due reminders: /remind [hours].")
