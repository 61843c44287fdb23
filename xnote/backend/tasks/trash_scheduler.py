"""
In-Process Trash Scheduler.

Runs the trash purge once a day at a fixed local time inside the API
process. Owned by the application lifespan: start() on startup, stop() on
shutdown.

The clock and the sleep coroutine are injectable so tests can drive ticks
and retention boundaries without waiting on the wall clock:

    scheduler = TrashScheduler(
        database,
        retention_days=7,
        clock=lambda: fixed_now,
        sleep=fake_sleep,
    )
    purged = await scheduler.run_once()

A tick that fails is logged and skipped; the loop keeps going and the
next tick runs at its normal time.
"""

import asyncio
from collections.abc import Awaitable, Callable
from datetime import datetime, timedelta, timezone

from xnote.backend.core.database import Database
from xnote.backend.core.logging import get_logger, log_with_source
from xnote.backend.core.utils import local_now, to_utc_naive
from xnote.backend.services.trash import DEFAULT_RETENTION_DAYS, TrashPurger

logger = get_logger(__name__)

Clock = Callable[[], datetime]
Sleep = Callable[[float], Awaitable[None]]


def next_run_after(now: datetime, hour: int, minute: int) -> datetime:
    """
    First hour:minute wall-clock time strictly after now, in now's timezone.

    With a ZoneInfo timezone the offset is recomputed for the returned day,
    so the tick stays at hour:minute local time across DST changes.
    """
    candidate = now.replace(hour=hour, minute=minute, second=0, microsecond=0)
    if candidate <= now:
        candidate += timedelta(days=1)
    return candidate


class TrashScheduler:
    """
    Daily purge of expired trashed notes.

    Args:
        database: Connected Database used to open one session per tick
        retention_days: Trashed notes older than this are purged
        purge_hour, purge_minute: Local time of the daily tick
        clock: Returns the current time as an aware datetime (local zone)
        sleep: Coroutine used to wait between ticks
    """

    def __init__(
        self,
        database: Database,
        retention_days: int = DEFAULT_RETENTION_DAYS,
        purge_hour: int = 2,
        purge_minute: int = 0,
        clock: Clock = local_now,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.database = database
        self.retention_days = retention_days
        self.purge_hour = purge_hour
        self.purge_minute = purge_minute
        self._clock = clock
        self._sleep = sleep
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def now_utc(self) -> datetime:
        """Current time from the injected clock as naive UTC, matching stored timestamps."""
        return to_utc_naive(self._clock())

    def seconds_until_next_run(self) -> float:
        now = self._clock()
        target = next_run_after(now, self.purge_hour, self.purge_minute)
        # Same-zone subtraction is wall-clock; elapsed time needs UTC
        return (target.astimezone(timezone.utc) - now.astimezone(timezone.utc)).total_seconds()

    async def run_once(self) -> int | None:
        """
        Execute one purge tick.

        Returns:
            Number of notes purged, or None if the tick failed.
        """
        now = self.now_utc()
        try:
            async with self.database.session() as session:
                purged = await TrashPurger(session, self.retention_days).purge_expired(now)
        except Exception:
            logger.exception(
                "Trash purge failed",
                extra={"source": "tasks", "retention_days": self.retention_days},
            )
            return None

        log_with_source(
            logger,
            "tasks",
            "info",
            "Trash purge completed",
            purged=purged,
            retention_days=self.retention_days,
        )
        return purged

    async def report_eligible(self) -> int | None:
        """
        Log how many trashed notes are already eligible for purge.

        Read-only; runs once at startup. Nothing is logged at info when the
        count is zero.

        Returns:
            The count, or None if the store could not be queried.
        """
        now = self.now_utc()
        try:
            async with self.database.session() as session:
                count = await TrashPurger(session, self.retention_days).count_eligible(now)
        except Exception as e:
            logger.warning(
                "Could not count notes eligible for purge",
                extra={"source": "tasks", "error": str(e)},
            )
            return None

        if count:
            log_with_source(
                logger,
                "tasks",
                "info",
                "Trashed notes eligible for purge",
                count=count,
                retention_days=self.retention_days,
            )
        return count

    def start(self) -> None:
        """Schedule the daily loop on the running event loop."""
        if self.running:
            return
        self._task = asyncio.create_task(self._run_forever(), name="trash-purge")
        logger.info(
            "Trash scheduler started",
            extra={
                "retention_days": self.retention_days,
                "purge_time": f"{self.purge_hour:02d}:{self.purge_minute:02d}",
            },
        )

    async def stop(self) -> None:
        """Cancel the loop and wait for it to finish."""
        if self._task is None:
            return
        task, self._task = self._task, None
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("Trash scheduler stopped")

    async def _run_forever(self) -> None:
        while True:
            delay = self.seconds_until_next_run()
            logger.debug("Next trash purge scheduled", extra={"in_seconds": int(delay)})
            await self._sleep(delay)
            await self.run_once()
