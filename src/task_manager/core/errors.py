# src/task_manager/core/errors.py

"""
Typed failures raised by the task core.

Every operation either returns its result or raises one of the AppError
subclasses below. Adapters turn them into user-visible responses via
error_response(); nothing else is expected to escape the core.
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID


class AppError(Exception):
    """Base class for domain failures."""


class TaskNotFound(AppError):
    """No live task for the given id (a UUID, or the raw text a console user typed)."""

    def __init__(self, task_id: UUID | str) -> None:
        super().__init__(f"Task {task_id} not found")
        self.task_id = task_id


class ValidationError(AppError):
    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class StatusDecodeError(ValidationError):
    """An external status token outside of todo / in_progress / done."""

    def __init__(self, token: str) -> None:
        super().__init__(f"Unknown task status: {token}")
        self.token = token


class InternalError(AppError):
    """Reserved for backends that can fail on their own (never raised by the in-memory store)."""

    def __init__(self, cause: str) -> None:
        super().__init__(cause)
        self.cause = cause


@dataclass(slots=True, frozen=True)
class ErrorResponse:
    code: str
    message: str


def error_response(err: AppError) -> ErrorResponse:
    if isinstance(err, TaskNotFound):
        return ErrorResponse("NOT_FOUND", f"Task {err.task_id} not found")
    if isinstance(err, ValidationError):
        return ErrorResponse("VALIDATION_ERROR", err.message)
    if isinstance(err, InternalError):
        return ErrorResponse("INTERNAL_ERROR", err.cause)
    return ErrorResponse("INTERNAL_ERROR", str(err))
