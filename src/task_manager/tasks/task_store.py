# src/task_manager/tasks/task_store.py

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import TypeVar
from uuid import UUID

from .task_models import Task

logger = logging.getLogger(__name__)

TaskMap = Mapping[UUID, Task]
R = TypeVar("R")


@dataclass(slots=True, frozen=True)
class StoreStats:
    size: int
    version: int
    commits: int
    conflicts: int
    fallbacks: int


class TaskStore:
    """
    In-memory task store.

    The whole state is one immutable mapping published through a single
    reference, paired with a version counter:
    - snapshot() reads that reference (wait-free, never blocks on writers)
    - atomic_update(fn) runs fn against a snapshot and commits the mapping it
      returns only if nobody else committed in between (compare-and-swap on the
      version); on conflict fn is simply re-run against the fresh state

    fn must be pure: it may run several times, only the (result, new_mapping)
    of the committed run counts.

    Progress:
    - after max_optimistic_retries conflicts the update is computed while
      holding the commit lock, so a writer under heavy contention still finishes

    There is no other way to reach the mapping; callers only ever see read-only views.
    """

    def __init__(self, *, max_optimistic_retries: int = 64) -> None:
        # (version, mapping) is swapped as one tuple so readers never see a torn pair.
        self._cell: tuple[int, TaskMap] = (0, MappingProxyType({}))
        self._commit_lock = threading.Lock()
        self._max_retries = max(0, int(max_optimistic_retries))

        self._commits = 0
        self._conflicts = 0
        self._fallbacks = 0
        logger.info("TaskStore ready (max_optimistic_retries=%s)", self._max_retries)

    # ---- low-level helpers ----

    def _publish(self, version: int, new_state: TaskMap) -> None:
        # Caller holds the commit lock.
        self._cell = (version + 1, MappingProxyType(dict(new_state)))
        self._commits += 1

    # ---- public API ----

    def snapshot(self) -> TaskMap:
        """Current state as a read-only mapping; may be stale by the time it is used."""
        return self._cell[1]

    def atomic_update(self, fn: Callable[[TaskMap], tuple[R, TaskMap]]) -> R:
        """
        Apply fn(current) -> (result, new_state) as one indivisible step and return result.

        Returning the very same mapping object that was passed in means "no change";
        nothing is committed in that case.
        """
        attempts = 0
        while attempts < self._max_retries:
            version, current = self._cell
            result, new_state = fn(current)
            if new_state is current:
                return result

            with self._commit_lock:
                if self._cell[0] == version:
                    self._publish(version, new_state)
                    return result
                self._conflicts += 1

            attempts += 1
            logger.debug("TaskStore commit conflict at version=%s (attempt %s)", version, attempts)

        # Contended past the optimistic budget: compute under the lock so this writer is guaranteed to finish.
        with self._commit_lock:
            version, current = self._cell
            result, new_state = fn(current)
            if new_state is not current:
                self._publish(version, new_state)
            self._fallbacks += 1
        logger.debug("TaskStore update committed under lock after %s conflicts", attempts)
        return result

    def get(self, task_id: UUID) -> Task | None:
        return self.snapshot().get(task_id)

    def count(self) -> int:
        return len(self.snapshot())

    def stats(self) -> StoreStats:
        version, current = self._cell
        return StoreStats(
            size=len(current),
            version=version,
            commits=self._commits,
            conflicts=self._conflicts,
            fallbacks=self._fallbacks,
        )
