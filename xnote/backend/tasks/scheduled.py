"""
Scheduled Background Tasks.

Tasks that run on a schedule (cron-based) through taskiq. The trash purge
is the only one: it is the worker-side twin of the in-process
TrashScheduler and runs the same TrashPurger against its own database
connection.

Schedule Format:
    schedule=[{"cron": "* * * * *", "args": [...], "kwargs": {...}}]

Cron Format:
    ┌───────────── minute (0-59)
    │ ┌───────────── hour (0-23)
    │ │ ┌───────────── day of month (1-31)
    │ │ │ ┌───────────── month (1-12)
    │ │ │ │ ┌───────────── day of week (0-6, Sun=0)
    │ │ │ │ │
    * * * * *

Taskiq evaluates cron expressions in UTC unless the schedule carries a
cron_offset. The purge schedule sets it to the server's local zone so the
worker fires at the same local time as the in-process scheduler.

Usage:
    # Call directly (no broker required)
    from xnote.backend.tasks.scheduled import purge_trashed_notes
    result = await purge_trashed_notes()

    # Start scheduler
    taskiq scheduler xnote.backend.tasks.scheduler:scheduler
"""

from typing import Any

from xnote.backend.core.exceptions import DatabaseError
from xnote.backend.core.logging import get_logger
from xnote.backend.core.utils import local_zone, utc_now

logger = get_logger(__name__)


def purge_cron_expression(hour: int, minute: int) -> str:
    """Daily cron expression for hour:minute."""
    return f"{minute} {hour} * * *"


def local_cron_offset() -> str | None:
    """IANA name of the local zone for taskiq's cron_offset, or None if unnamed."""
    return getattr(local_zone(), "key", None)


# =============================================================================
# Scheduled Task Functions
# =============================================================================
# Plain async functions. They get wrapped with broker.task() and schedule
# configuration when register_scheduled_tasks() is called.


async def purge_trashed_notes(retention_days: int | None = None) -> dict[str, Any]:
    """
    Permanently delete trashed notes older than the retention window.

    Args:
        retention_days: Override for the configured retention window

    Returns:
        Purge statistics
    """
    from xnote.backend.core.config import get_trash_retention_days
    from xnote.backend.core.database import create_database
    from xnote.backend.tasks.trash_scheduler import TrashScheduler

    effective_retention = retention_days or get_trash_retention_days()
    logger.info(
        "Starting trash purge",
        extra={"source": "tasks", "retention_days": effective_retention},
    )

    database = create_database()
    try:
        await database.connect()
        purged = await TrashScheduler(database, retention_days=effective_retention).run_once()
    except DatabaseError as e:
        logger.error("Trash purge skipped", extra={"source": "tasks", "error": e.message})
        purged = None
    finally:
        await database.disconnect()

    return {
        "status": "completed" if purged is not None else "failed",
        "purged": purged,
        "retention_days": effective_retention,
        "completed_at": utc_now().isoformat(),
    }


# =============================================================================
# Schedule Configuration
# =============================================================================

SCHEDULED_TASKS = {
    "purge_trashed_notes": {
        "function": purge_trashed_notes,
        "schedule": [{"cron": purge_cron_expression(2, 0)}],
        "retry_on_error": False,
        "description": "Permanently delete expired trashed notes daily",
    },
}


def build_schedule(task_name: str) -> list[dict[str, Any]]:
    """
    Schedule for a task, with the purge time taken from trash.yaml and
    evaluated in the local zone.

    Falls back to the static SCHEDULED_TASKS entry for other tasks.
    """
    if task_name == "purge_trashed_notes":
        from xnote.backend.core.config import get_app_config

        trash = get_app_config().trash
        schedule: dict[str, Any] = {
            "cron": purge_cron_expression(trash.purge_hour, trash.purge_minute),
        }
        offset = local_cron_offset()
        if offset:
            schedule["cron_offset"] = offset
        else:
            logger.warning("Local zone has no name; trash purge cron runs in UTC")
        return [schedule]
    return SCHEDULED_TASKS[task_name]["schedule"]


def register_scheduled_tasks(broker: Any) -> dict[str, Any]:
    """
    Register scheduled task functions with the Taskiq broker.

    This wraps the plain async functions with broker.task decorators
    including their schedule configuration.

    Returns:
        Dict mapping task names to registered task objects
    """
    registered = {}

    for task_name, config in SCHEDULED_TASKS.items():
        task_kwargs = {
            "task_name": task_name,
            "schedule": build_schedule(task_name),
            "retry_on_error": config.get("retry_on_error", False),
        }

        registered[task_name] = broker.task(**task_kwargs)(config["function"])

    logger.info(
        "Scheduled tasks registered",
        extra={
            "task_count": len(registered),
            "tasks": list(registered.keys()),
        },
    )

    return registered
