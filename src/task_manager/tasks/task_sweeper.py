# src/task_manager/tasks/task_sweeper.py

from __future__ import annotations

"""
Expiry sweeper.

A small periodic loop that:
- computes threshold = now - retention,
- calls the repository's public delete_completed_before(threshold),
- logs how many completed tasks were dropped.

It goes through the same atomic step as any foreground caller, so it needs no
coordination with them. Scheduling (thread / event loop) belongs to the runner
below, not to the repository.
"""

import asyncio
import contextlib
import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta

from ..core.ports import Clock, TaskRepo
from .task_service import utc_now

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SECONDS = 3600.0
DEFAULT_RETENTION_SECONDS = 86400.0


def sweep_once(
        repo: TaskRepo,
        *,
        retention_seconds: float = DEFAULT_RETENTION_SECONDS,
        now: datetime | None = None,
) -> int:
    """Run a single sweep and return the number of removed tasks."""
    if now is None:
        now = utc_now()
    threshold = now - timedelta(seconds=max(0.0, float(retention_seconds)))
    return repo.delete_completed_before(threshold)


async def run_expiry_sweeper(
        repo: TaskRepo,
        *,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
        retention_seconds: float = DEFAULT_RETENTION_SECONDS,
        clock: Clock = utc_now,
        stop_event: asyncio.Event | None = None,
) -> None:
    """
    Fixed-period sweep loop. The first sweep runs immediately.

    Every interval_seconds:
    - drop DONE tasks whose updated_at is older than retention_seconds
    - a failing sweep is logged and the loop keeps going

    To stop the sweeper, set stop_event or cancel the coroutine/task.
    """
    sleep_s = max(0.01, float(interval_seconds))
    logger.info(
        "Expiry sweeper started (interval=%ss retention=%ss)",
        sleep_s,
        retention_seconds,
    )

    while stop_event is None or not stop_event.is_set():
        try:
            removed = sweep_once(repo, retention_seconds=retention_seconds, now=clock())
            if removed > 0:
                logger.info("Background cleanup: removed %s completed task(s)", removed)
        except Exception:
            logger.exception("Expiry sweep failed")

        if stop_event is None:
            await asyncio.sleep(sleep_s)
            continue

        with contextlib.suppress(TimeoutError):
            await asyncio.wait_for(stop_event.wait(), timeout=sleep_s)

    logger.info("Expiry sweeper stopped.")


@dataclass(slots=True)
class SweeperBackgroundRunner:
    thread: threading.Thread
    loop: asyncio.AbstractEventLoop
    stop_event: asyncio.Event

    def stop(self) -> None:
        try:
            self.loop.call_soon_threadsafe(self.stop_event.set)
        except RuntimeError:
            logger.debug("Sweeper loop already closed.", exc_info=True)

    def join(self, timeout: float | None = None) -> None:
        self.thread.join(timeout=timeout)


def start_sweeper_in_background(
        repo: TaskRepo,
        *,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
        retention_seconds: float = DEFAULT_RETENTION_SECONDS,
) -> SweeperBackgroundRunner | None:
    """
    Start the expiry sweeper on its own event loop in a daemon thread,
    so a blocking foreground (console REPL) can run in parallel.
    """
    ready = threading.Event()
    holder: dict[str, object] = {}

    def runner() -> None:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        stop_event = asyncio.Event()

        holder["loop"] = loop
        holder["stop_event"] = stop_event
        ready.set()

        try:
            loop.run_until_complete(
                run_expiry_sweeper(
                    repo,
                    interval_seconds=interval_seconds,
                    retention_seconds=retention_seconds,
                    stop_event=stop_event,
                )
            )
        finally:
            loop.close()

    t = threading.Thread(target=runner, name="expiry-sweeper", daemon=True)
    t.start()

    ready.wait(timeout=5.0)
    loop = holder.get("loop")
    stop_event = holder.get("stop_event")

    if not isinstance(loop, asyncio.AbstractEventLoop) or not isinstance(stop_event, asyncio.Event):
        logger.error("Sweeper thread did not initialize properly.")
        return None

    logger.info("Expiry sweeper background thread started.")
    return SweeperBackgroundRunner(thread=t, loop=loop, stop_event=stop_event)
