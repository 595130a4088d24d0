# src/task_manager/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Callable
from uuid import UUID

from ..core.errors import AppError, TaskNotFound, ValidationError, error_response
from ..core.state import AppState
from ..tasks.task_models import Task, TaskStatus
from ..tasks.task_sweeper import sweep_once

CommandHandler = Callable[[AppState, list[str]], str]

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by connectors (/help, /add, /list, ...)."""

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

    def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.

        Domain failures are rendered as "<CODE>: <message>" so a wrong id
        reads differently from bad input.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            return handler(state, args)
        except AppError as e:
            resp = error_response(e)
            logger.info("/%s failed: %s %s", name, resp.code, resp.message)
            return f"{resp.code}: {resp.message}"

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _format_task(task: Task) -> str:
    line = f"{task.id} [{task.status.value}] {task.title}"
    if task.description:
        line += f" - {task.description}"
    return line


def resolve_task_id(state: AppState, raw: str) -> UUID:
    """
    Accept a full UUID or an unambiguous prefix of a live task id.
    """
    try:
        return UUID(raw)
    except ValueError:
        pass

    prefix = raw.strip().lower()
    if not prefix:
        raise ValidationError("Task id is required")

    matches = [t.id for t in state.tasks.list() if str(t.id).startswith(prefix)]
    if len(matches) == 1:
        return matches[0]
    if not matches:
        raise TaskNotFound(raw)
    raise ValidationError(f"Task id prefix '{raw}' is ambiguous ({len(matches)} matches)")


def _require_id(state: AppState, args: list[str], usage: str) -> UUID:
    if not args:
        raise ValidationError(f"Usage: {usage}")
    return resolve_task_id(state, args[0])


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add Buy milk              -> title only
    /add Buy milk | 2% organic -> title and description
    """
    title, sep, description = " ".join(args).partition("|")
    task = state.tasks.create(title, description if sep else None)
    return f"Created: {_format_task(task)}"


def cmd_list(state: AppState, args: list[str]) -> str:
    status = TaskStatus.parse(args[0]) if args else None
    tasks = state.tasks.list(status)
    if not tasks:
        return "No tasks." if status is None else f"No tasks with status {status.value}."
    lines = [f"Tasks ({len(tasks)}):"]
    for i, t in enumerate(tasks, start=1):
        lines.append(f"{i}. {_format_task(t)}")
    return "\n".join(lines)


def cmd_show(state: AppState, args: list[str]) -> str:
    task = state.tasks.get_by_id(_require_id(state, args, "/show <id>"))
    d = task.to_dict()
    return "\n".join(f"  {k}: {v if v is not None else '-'}" for k, v in d.items())


def cmd_edit(state: AppState, args: list[str]) -> str:
    """
    /edit <id> title <new title>
    /edit <id> description <text>   (empty text clears it)
    /edit <id> status <todo|in_progress|done>
    """
    usage = "/edit <id> title|description|status <value>"
    task_id = _require_id(state, args, usage)
    if len(args) < 2:
        raise ValidationError(f"Usage: {usage}")

    field = args[1].lower()
    value = " ".join(args[2:])

    if field == "title":
        task = state.tasks.update(task_id, title=value)
    elif field in ("description", "desc"):
        task = state.tasks.update(task_id, description=value)
    elif field == "status":
        task = state.tasks.update(task_id, status=TaskStatus.parse(value.strip()))
    else:
        raise ValidationError(f"Unknown field '{field}'. Usage: {usage}")

    return f"Updated: {_format_task(task)}"


def cmd_done(state: AppState, args: list[str]) -> str:
    task = state.tasks.update(_require_id(state, args, "/done <id>"), status=TaskStatus.DONE)
    return f"Updated: {_format_task(task)}"


def cmd_status(state: AppState, args: list[str]) -> str:
    usage = "/status <id> <todo|in_progress|done>"
    task_id = _require_id(state, args, usage)
    if len(args) < 2:
        raise ValidationError(f"Usage: {usage}")
    task = state.tasks.update(task_id, status=TaskStatus.parse(args[1]))
    return f"Updated: {_format_task(task)}"


def cmd_rm(state: AppState, args: list[str]) -> str:
    task_id = _require_id(state, args, "/rm <id>")
    state.tasks.delete(task_id)
    return f"Deleted: {task_id}"


def cmd_sweep(state: AppState, args: list[str]) -> str:
    """
    /sweep        -> drop done tasks older than the configured retention
    /sweep <hrs>  -> same, with an explicit look-back in hours (0 = every done task)
    """
    retention = float(getattr(state.settings, "sweep_retention_seconds", 86400.0))
    if args:
        try:
            retention = float(args[0]) * 3600.0
        except ValueError:
            raise ValidationError("Usage: /sweep [hours]") from None

    try:
        removed = sweep_once(state.tasks, retention_seconds=retention)
    except OverflowError:
        # inf, or a look-back reaching past datetime.min
        raise ValidationError("Usage: /sweep [hours]") from None
    return f"Removed {removed} completed task(s)."


def cmd_stats(state: AppState, args: list[str]) -> str:
    s = state.tasks.store.stats()
    by_status = {st: 0 for st in TaskStatus}
    for t in state.tasks.list():
        by_status[t.status] += 1
    counts = ", ".join(f"{st.value}={n}" for st, n in by_status.items())
    return (
        "Store:\n"
        f"  Tasks: {s.size} ({counts})\n"
        f"  Version: {s.version}\n"
        f"  Commits: {s.commits}, conflicts: {s.conflicts}, locked fallbacks: {s.fallbacks}"
    )


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("add", cmd_add, help_text="Create a task: /add <title> [| description].")
registry.register("list", cmd_list, help_text="List tasks: /list [todo|in_progress|done].", aliases=["ls"])
registry.register("show", cmd_show, help_text="Show one task: /show <id>.")
registry.register("edit", cmd_edit, help_text="Edit a task: /edit <id> title|description|status <value>.")
registry.register("done", cmd_done, help_text="Mark a task done: /done <id>.")
registry.register("status", cmd_status, help_text="Set a status: /status <id> <todo|in_progress|done>.")
registry.register("rm", cmd_rm, help_text="Delete a task: /rm <id>.", aliases=["delete"])
registry.register("sweep", cmd_sweep, help_text="Drop old completed tasks now: /sweep [hours].")
registry.register("stats", cmd_stats, help_text="Show store diagnostics.")
