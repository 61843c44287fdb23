"""
Task Scheduler Configuration.

Configures the Taskiq scheduler that sends purge_trashed_notes to the
worker on its cron schedule. Uses LabelScheduleSource, so schedules come
from the task labels that get_broker() registers.

Usage:
    taskiq scheduler xnote.backend.tasks.scheduler:scheduler

Important:
    Run only ONE scheduler instance, and switch off
    trash_scheduler_enabled in features.yaml so the API process does not
    purge as well.
"""

from typing import TYPE_CHECKING

from xnote.backend.core.logging import get_logger

logger = get_logger(__name__)

if TYPE_CHECKING:
    from taskiq import TaskiqScheduler


def create_scheduler() -> "TaskiqScheduler":
    """
    Create and configure the Taskiq scheduler.

    Returns:
        Configured TaskiqScheduler instance
    """
    from taskiq import TaskiqScheduler
    from taskiq.schedule_sources import LabelScheduleSource

    from xnote.backend.tasks.broker import get_broker

    broker = get_broker()

    scheduler = TaskiqScheduler(
        broker=broker,
        sources=[LabelScheduleSource(broker)],
    )

    logger.info("Taskiq scheduler configured with LabelScheduleSource")

    return scheduler


_scheduler: "TaskiqScheduler | None" = None


def get_scheduler() -> "TaskiqScheduler":
    """Get the scheduler instance, creating it if necessary."""
    global _scheduler
    if _scheduler is None:
        _scheduler = create_scheduler()
    return _scheduler


def __getattr__(name: str):
    """Lazy attribute access for scheduler."""
    if name == "scheduler":
        return get_scheduler()
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
