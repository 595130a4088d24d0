# tests/test_task_sweeper.py

from __future__ import annotations

import asyncio
from datetime import timedelta

import pytest

from task_manager.tasks.task_models import TaskStatus
from task_manager.tasks.task_service import InMemoryTaskService
from task_manager.tasks.task_sweeper import (
    run_expiry_sweeper,
    start_sweeper_in_background,
    sweep_once,
)

from .fakes import FakeClock, RecordingRepo


def test_sweep_once_uses_retention_look_back(clock: FakeClock) -> None:
    repo = RecordingRepo(removed=3)
    assert sweep_once(repo, retention_seconds=86400, now=clock.now) == 3
    assert repo.thresholds == [clock.now - timedelta(hours=24)]


def test_sweep_once_drops_only_expired_done_tasks(
    service: InMemoryTaskService, clock: FakeClock
) -> None:
    old = service.create("old")
    service.update(old.id, status=TaskStatus.DONE)
    open_task = service.create("open")

    clock.advance(hours=25)
    recent = service.create("recent")
    service.update(recent.id, status=TaskStatus.DONE)

    assert sweep_once(service, retention_seconds=86400, now=clock.now) == 1
    assert {t.id for t in service.list()} == {open_task.id, recent.id}


@pytest.mark.asyncio
async def test_sweeper_runs_immediately_and_repeats(
    service: InMemoryTaskService, clock: FakeClock
) -> None:
    task = service.create("finish")
    service.update(task.id, status=TaskStatus.DONE)
    clock.advance(days=2)

    stop = asyncio.Event()
    runner = asyncio.create_task(
        run_expiry_sweeper(
            service,
            interval_seconds=0.01,
            retention_seconds=86400,
            clock=clock,
            stop_event=stop,
        )
    )

    await asyncio.sleep(0.05)
    assert service.list() == []

    # A task finished later is picked up by a later round.
    second = service.create("second")
    service.update(second.id, status=TaskStatus.DONE)
    clock.advance(days=2)
    await asyncio.sleep(0.05)

    stop.set()
    await asyncio.wait_for(runner, timeout=1.0)
    assert service.list() == []


@pytest.mark.asyncio
async def test_sweeper_survives_failing_rounds(clock: FakeClock) -> None:
    repo = RecordingRepo(removed=0, fail_times=2)

    runner = asyncio.create_task(
        run_expiry_sweeper(repo, interval_seconds=0.01, retention_seconds=60, clock=clock)
    )

    await asyncio.sleep(0.1)
    runner.cancel()
    with pytest.raises(asyncio.CancelledError):
        await runner

    assert len(repo.thresholds) > 2, "Sweeper should keep going after failures"
    assert repo.fail_times == 0


def test_background_runner_sweeps_and_stops(service: InMemoryTaskService) -> None:
    task = service.create("done already")
    service.update(task.id, status=TaskStatus.DONE)

    runner = start_sweeper_in_background(service, interval_seconds=0.01, retention_seconds=0)
    assert runner is not None
    try:
        for _ in range(200):
            if not service.list():
                break
            runner.thread.join(timeout=0.01)
        assert service.list() == []
    finally:
        runner.stop()
        runner.join(timeout=5.0)

    assert not runner.thread.is_alive()
