# src/task_manager/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import Any
from uuid import UUID

from ..core.errors import StatusDecodeError


class TaskStatus(StrEnum):
    """
    Task lifecycle status.

    The values are the external tokens; there is no ordering between them,
    any status may move to any other.
    """

    TODO = "todo"
    IN_PROGRESS = "in_progress"
    DONE = "done"

    @classmethod
    def parse(cls, raw: str) -> TaskStatus:
        """Decode an external token; anything but the three known tokens is rejected."""
        try:
            return cls(raw)
        except ValueError:
            raise StatusDecodeError(raw) from None


@dataclass(slots=True, frozen=True)
class Task:
    id: UUID
    title: str
    description: str | None
    status: TaskStatus
    created_at: datetime
    updated_at: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }


@dataclass(slots=True, frozen=True)
class CreateTaskRequest:
    title: str
    description: str | None = None


@dataclass(slots=True, frozen=True)
class UpdateTaskRequest:
    """Partial update; None means "leave the field as it is"."""

    title: str | None = None
    description: str | None = None
    status: TaskStatus | None = None
