# src/task_manager/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..tasks.task_service import InMemoryTaskService


@dataclass
class AppState:
    # Settings object (config.Settings or a test stand-in with the same attributes).
    settings: Any

    tasks: InMemoryTaskService
