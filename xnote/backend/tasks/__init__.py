"""
Background Tasks Package.

The daily trash purge can run two ways:

1. In-process (default): TrashScheduler, started by the API lifespan when
   trash_scheduler_enabled is set in features.yaml.
2. Taskiq: purge_trashed_notes registered on the Redis-backed broker with
   a cron label, sent by the taskiq scheduler to a worker.

Usage (without Redis - testing):
    from xnote.backend.tasks import TrashScheduler, purge_trashed_notes

CLI Commands:
    taskiq worker xnote.backend.tasks.broker:broker
    taskiq scheduler xnote.backend.tasks.scheduler:scheduler

Important:
    Run only ONE of the two purge paths, and only ONE taskiq scheduler.
"""

from xnote.backend.tasks.broker import get_broker
from xnote.backend.tasks.scheduled import (
    SCHEDULED_TASKS,
    purge_trashed_notes,
    register_scheduled_tasks,
)
from xnote.backend.tasks.scheduler import get_scheduler
from xnote.backend.tasks.trash_scheduler import TrashScheduler, next_run_after

__all__ = [
    "SCHEDULED_TASKS",
    "TrashScheduler",
    "get_broker",
    "get_scheduler",
    "next_run_after",
    "purge_trashed_notes",
    "register_scheduled_tasks",
]
