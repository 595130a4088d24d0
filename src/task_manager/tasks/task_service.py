# src/task_manager/tasks/task_service.py

from __future__ import annotations

"""
Task repository service.

Business rules on top of TaskStore: validation, timestamps, filtering and
the expiry policy. Each id-addressed operation is exactly one
TaskStore.atomic_update call, so concurrent callers are linearizable.

Failures are typed (TaskNotFound / ValidationError). Inside the atomic step
they are returned as values, so the transform stays pure, and raised once the
step is over.
"""

import logging
from dataclasses import replace
from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

from ..core.errors import AppError, TaskNotFound, ValidationError
from .task_models import CreateTaskRequest, Task, TaskStatus, UpdateTaskRequest
from .task_store import TaskMap, TaskStore

logger = logging.getLogger(__name__)

EMPTY_TITLE_MESSAGE = "Title must not be empty"

_TICK = timedelta(microseconds=1)


def utc_now() -> datetime:
    return datetime.now(UTC)


def _clean_title(raw: str) -> str:
    title = (raw or "").strip()
    if not title:
        raise ValidationError(EMPTY_TITLE_MESSAGE)
    return title


def _clean_description(raw: str | None) -> str | None:
    if raw is None:
        return None
    text = raw.strip()
    return text or None


def _next_updated_at(previous: datetime, now: datetime) -> datetime:
    # Strictly later than the previous stamp, even if the clock stalled or stepped back.
    return now if now > previous else previous + _TICK


class InMemoryTaskService:
    """Task repository backed by an in-memory TaskStore."""

    def __init__(self, store: TaskStore | None = None, *, clock=utc_now) -> None:
        self._store = store if store is not None else TaskStore()
        self._clock = clock

    @property
    def store(self) -> TaskStore:
        return self._store

    # ---- CRUD ----

    def create(self, title: str, description: str | None = None) -> Task:
        clean_title = _clean_title(title)
        clean_description = _clean_description(description)
        now = self._clock()

        while True:
            task = Task(
                id=uuid4(),
                title=clean_title,
                description=clean_description,
                status=TaskStatus.TODO,
                created_at=now,
                updated_at=now,
            )

            def insert(tasks: TaskMap, task: Task = task) -> tuple[bool, TaskMap]:
                if task.id in tasks:
                    return False, tasks
                new_tasks = dict(tasks)
                new_tasks[task.id] = task
                return True, new_tasks

            if self._store.atomic_update(insert):
                break
            logger.warning("Task id collision on %s; regenerating", task.id)

        logger.info("Task created id=%s", task.id)
        return task

    def create_from(self, request: CreateTaskRequest) -> Task:
        return self.create(request.title, request.description)

    def get_by_id(self, task_id: UUID) -> Task:
        task = self._store.snapshot().get(task_id)
        if task is None:
            raise TaskNotFound(task_id)
        return task

    def list(self, status_filter: TaskStatus | None = None) -> list[Task]:
        """
        All live tasks in creation order (ties broken by id), optionally only one status.
        """
        tasks = sorted(self._store.snapshot().values(), key=lambda t: (t.created_at, t.id))
        if status_filter is None:
            return tasks
        return [t for t in tasks if t.status == status_filter]

    def update(
        self,
        task_id: UUID,
        *,
        title: str | None = None,
        description: str | None = None,
        status: TaskStatus | None = None,
    ) -> Task:
        """
        Merge the supplied fields into an existing task.

        - title: trimmed; an empty result is rejected with ValidationError
        - description: trimmed; an empty result clears it
        - status: any status may follow any other
        Omitted (None) fields are kept. updated_at always moves forward.
        """
        new_title = _clean_title(title) if title is not None else None
        new_description = _clean_description(description) if description is not None else None
        now = self._clock()

        def apply(tasks: TaskMap) -> tuple[Task | AppError, TaskMap]:
            existing = tasks.get(task_id)
            if existing is None:
                return TaskNotFound(task_id), tasks

            updated = replace(
                existing,
                title=existing.title if new_title is None else new_title,
                description=existing.description if description is None else new_description,
                status=existing.status if status is None else status,
                updated_at=_next_updated_at(existing.updated_at, now),
            )
            new_tasks = dict(tasks)
            new_tasks[task_id] = updated
            return updated, new_tasks

        result = self._store.atomic_update(apply)
        if isinstance(result, AppError):
            raise result

        logger.info("Task updated id=%s status=%s", task_id, result.status.value)
        return result

    def update_from(self, task_id: UUID, request: UpdateTaskRequest) -> Task:
        return self.update(
            task_id,
            title=request.title,
            description=request.description,
            status=request.status,
        )

    def delete(self, task_id: UUID) -> None:
        def remove(tasks: TaskMap) -> tuple[bool, TaskMap]:
            if task_id not in tasks:
                return False, tasks
            new_tasks = dict(tasks)
            del new_tasks[task_id]
            return True, new_tasks

        if not self._store.atomic_update(remove):
            raise TaskNotFound(task_id)
        logger.info("Task deleted id=%s", task_id)

    # ---- Expiry ----

    def delete_completed_before(self, threshold: datetime) -> int:
        """
        Remove every DONE task whose updated_at is strictly before threshold.

        Returns how many were removed (0 is a normal outcome).
        """
        if threshold.tzinfo is None:
            # Stored stamps are UTC; a naive threshold is read as UTC too.
            threshold = threshold.replace(tzinfo=UTC)

        def purge(tasks: TaskMap) -> tuple[int, TaskMap]:
            expired = {
                tid
                for tid, t in tasks.items()
                if t.status == TaskStatus.DONE and t.updated_at < threshold
            }
            if not expired:
                return 0, tasks
            return len(expired), {tid: t for tid, t in tasks.items() if tid not in expired}

        removed = self._store.atomic_update(purge)
        if removed:
            logger.info("Removed %s completed task(s) older than %s", removed, threshold.isoformat())
        return removed
