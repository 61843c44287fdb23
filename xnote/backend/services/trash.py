"""
Trash Lifecycle.

A note is in exactly one of three states, derived from its
(deleted, deleted_at) pair:

    ACTIVE   deleted is false, deleted_at is null
    TRASHED  deleted is true, deleted_at is the time it entered the trash
    PURGED   the record no longer exists

Legal moves:

    ACTIVE  --trash-->          TRASHED
    TRASHED --restore-->        ACTIVE
    TRASHED --purge-->          PURGED   (retention job only)
    ACTIVE  --delete_forever--> PURGED
    TRASHED --delete_forever--> PURGED

Everything else raises InvalidTransitionError.

TrashPurger applies the retention policy: a trashed note is eligible for
purge once deleted_at <= now - retention.
"""

from datetime import datetime, timedelta
from enum import StrEnum

from sqlalchemy.ext.asyncio import AsyncSession

from xnote.backend.core.exceptions import InvalidTransitionError
from xnote.backend.models.note import Note
from xnote.backend.repositories.note import NoteRepository
from xnote.backend.services.base import BaseService

DEFAULT_RETENTION_DAYS = 7


class NoteState(StrEnum):
    ACTIVE = "active"
    TRASHED = "trashed"
    PURGED = "purged"


class TrashAction(StrEnum):
    TRASH = "trash"
    RESTORE = "restore"
    PURGE = "purge"
    DELETE_FOREVER = "delete_forever"


TRANSITIONS: dict[tuple[NoteState, TrashAction], NoteState] = {
    (NoteState.ACTIVE, TrashAction.TRASH): NoteState.TRASHED,
    (NoteState.TRASHED, TrashAction.RESTORE): NoteState.ACTIVE,
    (NoteState.TRASHED, TrashAction.PURGE): NoteState.PURGED,
    (NoteState.ACTIVE, TrashAction.DELETE_FOREVER): NoteState.PURGED,
    (NoteState.TRASHED, TrashAction.DELETE_FOREVER): NoteState.PURGED,
}


def note_state(note: Note | None) -> NoteState:
    """Derive the lifecycle state of a note; None means the record is gone."""
    if note is None:
        return NoteState.PURGED
    if note.deleted:
        return NoteState.TRASHED
    return NoteState.ACTIVE


def transition(state: NoteState, action: TrashAction) -> NoteState:
    """
    Validate a lifecycle move and return the resulting state.

    Raises:
        InvalidTransitionError: If action is not allowed from state
    """
    target = TRANSITIONS.get((state, action))
    if target is None:
        raise InvalidTransitionError(
            f"Cannot {action.value.replace('_', ' ')} a note that is {state.value}"
        )
    return target


def purge_cutoff(now: datetime, retention_days: int) -> datetime:
    """Latest deleted_at that is still old enough to purge at time now."""
    return now - timedelta(days=retention_days)


def is_purge_eligible(note: Note, now: datetime, retention_days: int) -> bool:
    return bool(
        note.deleted
        and note.deleted_at is not None
        and note.deleted_at <= purge_cutoff(now, retention_days)
    )


class TrashPurger(BaseService):
    """
    Retention policy over the note store.

    `now` is always passed in by the caller (timezone-naive UTC) so the
    retention boundary does not depend on the wall clock.
    """

    def __init__(self, session: AsyncSession, retention_days: int = DEFAULT_RETENTION_DAYS) -> None:
        super().__init__(session)
        self.repo = NoteRepository(session)
        self.retention_days = retention_days

    async def purge_expired(self, now: datetime) -> int:
        """
        Permanently delete every trashed note older than the retention window.

        Returns:
            Number of notes purged.
        """
        cutoff = purge_cutoff(now, self.retention_days)
        purged = await self._execute_db_operation(
            "purge_expired",
            self.repo.purge_trashed_before(cutoff),
        )
        self._log_debug("Expired trash purged", purged=purged, cutoff=cutoff.isoformat())
        return purged

    async def count_eligible(self, now: datetime) -> int:
        """Read-only count of trashed notes a purge at time now would remove."""
        cutoff = purge_cutoff(now, self.retention_days)
        return await self._execute_db_operation(
            "count_eligible",
            self.repo.count_trashed_before(cutoff),
        )
