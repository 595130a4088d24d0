# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from task_manager.core.state import AppState
from task_manager.tasks.task_service import InMemoryTaskService
from task_manager.tasks.task_store import TaskStore

from .fakes import FakeClock


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI modules.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="task-manager-test",
        log_level="DEBUG",
        data_dir=tmp_path / "data",
        console_enabled=False,
        sweeper_enabled=False,
        sweep_interval_seconds=3600.0,
        sweep_retention_seconds=86400.0,
        store_max_optimistic_retries=64,
    )


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def store() -> TaskStore:
    return TaskStore()


@pytest.fixture()
def service(store: TaskStore, clock: FakeClock) -> InMemoryTaskService:
    return InMemoryTaskService(store, clock=clock)


@pytest.fixture()
def state(settings: SimpleNamespace, service: InMemoryTaskService) -> AppState:
    """AppState wired with the real in-memory service and a controllable clock."""
    return AppState(settings=settings, tasks=service)
