"""Runtime utilities for fixed-rate page size checks."""
from __future__ import annotations

import asyncio
import logging
from datetime import UTC, datetime
from typing import Awaitable, Callable

from apscheduler.job import Job
from apscheduler.schedulers.asyncio import AsyncIOScheduler

from services.monitor import Monitor

logger = logging.getLogger(__name__)

MONITOR_JOB_ID = "page_size_check"


def schedule_monitor(
    scheduler: AsyncIOScheduler,
    cycle: Callable[[], Awaitable[object]],
    seconds: float,
) -> Job:
    """Register a monitor cycle as an interval job starting immediately."""
    if seconds <= 0:
        raise ValueError("Interval must be positive")

    return scheduler.add_job(
        cycle,
        "interval",
        seconds=seconds,
        id=MONITOR_JOB_ID,
        coalesce=True,
        max_instances=1,
        next_run_time=datetime.now(UTC),
    )


class CycleRunner:
    """Runs monitor cycles for the scheduler and keeps the running tasks."""

    def __init__(self, monitor: Monitor) -> None:
        self.monitor = monitor
        self.tasks: set[asyncio.Task] = set()

    async def run(self) -> None:
        task = asyncio.current_task()
        self.tasks.add(task)
        try:
            await self.monitor.run_cycle()
        finally:
            self.tasks.discard(task)

    async def cancel(self) -> None:
        """Cancel in-flight cycles and wait until they have stopped."""
        tasks = list(self.tasks)
        if not tasks:
            return
        logger.info("Cancelling %d running page size check(s)", len(tasks))
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)


async def run_fixed_rate(monitor: Monitor, seconds: float) -> None:
    """Run monitor cycles on a fixed clock until cancelled."""
    scheduler = AsyncIOScheduler()
    runner = CycleRunner(monitor)
    schedule_monitor(scheduler, runner.run, seconds)
    scheduler.start()
    try:
        await asyncio.Event().wait()
    finally:
        scheduler.shutdown(wait=False)
        await runner.cancel()
