"""Interval scheduling for the pollers: APScheduler jobs on the event loop.

Each poller is one ``IntervalTrigger`` job whose first run is immediate.
Runs fire on the interval grid whatever the previous run took, so a slow
endpoint can lead to overlapping cycles (bounded by ``max_instances``).
Overlap is safe: every cycle is sequenced by its poller's snapshot cell and
a stale cycle cannot overwrite a newer snapshot.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Awaitable, Protocol, runtime_checkable

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

logger = logging.getLogger(__name__)


@runtime_checkable
class Poller(Protocol):
    """Anything with a name and a never-raising async ``poll()``."""

    name: str

    def poll(self) -> Awaitable[bool]: ...


class PollingScheduler:
    """Runs registered pollers on fixed intervals until stopped."""

    def __init__(self, max_overlapping_polls: int = 2) -> None:
        self.max_overlapping_polls = max_overlapping_polls
        self._scheduler = AsyncIOScheduler(timezone=timezone.utc)
        self._intervals: dict[str, float] = {}
        self._running = False

    def register(self, poller: Poller, interval_seconds: float) -> None:
        """Add ``poller`` as a job; must be called before ``start()``."""
        self._scheduler.add_job(
            poller.poll,
            trigger=IntervalTrigger(seconds=interval_seconds, timezone=timezone.utc),
            id=poller.name,
            name=poller.name,
            next_run_time=datetime.now(timezone.utc),
            max_instances=self.max_overlapping_polls,
            coalesce=True,
            misfire_grace_time=None,
            replace_existing=True,
        )
        self._intervals[poller.name] = interval_seconds
        logger.info("Registered poller %s every %.1fs", poller.name, interval_seconds)

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        """Start the timers. Needs a running event loop."""
        if self._running:
            return
        self._scheduler.start()
        self._running = True
        logger.info("Polling scheduler started (%d jobs)", len(self._intervals))

    async def stop(self) -> None:
        """Cancel the timers without waiting for in-flight cycles.

        ``AsyncIOScheduler.shutdown`` only queues the shutdown on the loop;
        yielding once lets it run, so no job fires after this returns.
        """
        if not self._running:
            return
        self._running = False
        self._scheduler.shutdown(wait=False)
        await asyncio.sleep(0)
        logger.info("Polling scheduler stopped")

    def jobs(self) -> list[dict]:
        """Describe registered jobs."""
        return [
            {
                "id": job.id,
                "interval_seconds": self._intervals.get(job.id),
                "next_run": job.next_run_time.isoformat() if getattr(job, "next_run_time", None) else None,
            }
            for job in self._scheduler.get_jobs()
        ]
