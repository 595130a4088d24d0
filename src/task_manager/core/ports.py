# src/task_manager/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the adapters and the sweeper.

They depend on Protocols instead of the concrete service.
This keeps the in-memory backend swappable and makes testing easier.
"""

from collections.abc import Callable
from datetime import datetime
from typing import Protocol
from uuid import UUID

from ..tasks.task_models import Task, TaskStatus

Clock = Callable[[], datetime]
# Returns a timezone-aware "now"; injected so tests can control time.


class TaskRepo(Protocol):
    # CRUD
    def create(self, title: str, description: str | None = None) -> Task: ...
    def get_by_id(self, task_id: UUID) -> Task: ...
    def list(self, status_filter: TaskStatus | None = None) -> list[Task]: ...
    def update(
            self,
            task_id: UUID,
            *,
            title: str | None = None,
            description: str | None = None,
            status: TaskStatus | None = None,
    ) -> Task: ...
    def delete(self, task_id: UUID) -> None: ...

    # Expiry sweep
    def delete_completed_before(self, threshold: datetime) -> int: ...
