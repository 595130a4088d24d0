# tests/test_task_models.py

from __future__ import annotations

import pytest

from task_manager.core.errors import (
    InternalError,
    StatusDecodeError,
    TaskNotFound,
    ValidationError,
    error_response,
)
from task_manager.tasks.task_models import TaskStatus
from task_manager.tasks.task_service import InMemoryTaskService


def test_status_tokens_are_exactly_three() -> None:
    assert [s.value for s in TaskStatus] == ["todo", "in_progress", "done"]
    assert TaskStatus.parse("in_progress") is TaskStatus.IN_PROGRESS


@pytest.mark.parametrize("token", ["", "Done", "in-progress", "completed", "pending"])
def test_unknown_status_token_is_a_decode_error(token: str) -> None:
    with pytest.raises(StatusDecodeError) as exc:
        TaskStatus.parse(token)
    assert isinstance(exc.value, ValidationError)
    assert exc.value.token == token


def test_task_to_dict_uses_external_tokens(service: InMemoryTaskService) -> None:
    task = service.create("Write docs", " draft ")
    d = task.to_dict()

    assert d["id"] == str(task.id)
    assert d["description"] == "draft"
    assert d["status"] == "todo"
    assert d["createdAt"] == task.created_at.isoformat()
    assert d["updatedAt"] == task.updated_at.isoformat()


def test_error_response_distinguishes_failures(service: InMemoryTaskService) -> None:
    task = service.create("T")
    service.delete(task.id)

    not_found = error_response(TaskNotFound(task.id))
    assert not_found.code == "NOT_FOUND"
    assert not_found.message == f"Task {task.id} not found"

    invalid = error_response(ValidationError("Title must not be empty"))
    assert (invalid.code, invalid.message) == ("VALIDATION_ERROR", "Title must not be empty")

    internal = error_response(InternalError("disk on fire"))
    assert (internal.code, internal.message) == ("INTERNAL_ERROR", "disk on fire")
