"""
Note Repository.

Data access layer for notes. Lifecycle writes and toggles are issued as
single guarded UPDATE/DELETE statements so that concurrent requests on
the same note never interleave a read and a write.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import delete, func, not_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from xnote.backend.models.note import Note
from xnote.backend.repositories.base import BaseRepository

TOGGLEABLE_FIELDS = frozenset({"pinned", "archived"})


class NoteRepository(BaseRepository[Note]):
    """
    Repository for Note model.

    Inherits standard CRUD operations from BaseRepository
    and adds listing, lifecycle and purge queries.
    """

    model = Note

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def list_active(self) -> list[Note]:
        """All non-deleted notes across users, newest first."""
        result = await self.session.execute(
            select(Note)
            .where(Note.deleted == False)  # noqa: E712
            .order_by(Note.created_at.desc())
        )
        return list(result.scalars().all())

    async def list_active_for_owner(self, email: str) -> list[Note]:
        """
        Non-deleted notes of one user.

        Pinned notes come first; within each pin group, newest first.
        """
        result = await self.session.execute(
            select(Note)
            .where(Note.email == email)
            .where(Note.deleted == False)  # noqa: E712
            .order_by(Note.pinned.desc(), Note.created_at.desc())
        )
        return list(result.scalars().all())

    async def list_trashed_for_owner(self, email: str) -> list[Note]:
        """Trashed notes of one user, most recently trashed first."""
        result = await self.session.execute(
            select(Note)
            .where(Note.email == email)
            .where(Note.deleted == True)  # noqa: E712
            .order_by(Note.deleted_at.desc())
        )
        return list(result.scalars().all())

    async def update_if_deleted_is(
        self,
        id: str,
        expected_deleted: bool,
        **values: Any,
    ) -> bool:
        """
        Write values only while the note's deleted flag still has the expected value.

        Returns:
            True if a row was updated, False if the note is missing or its
            state changed underneath the caller.
        """
        result = await self.session.execute(
            update(Note)
            .where(Note.id == id)
            .where(Note.deleted == expected_deleted)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0

    async def toggle(self, id: str, field: str) -> bool:
        """
        Flip a boolean flag in one statement.

        Returns:
            True if the note exists and was updated.
        """
        if field not in TOGGLEABLE_FIELDS:
            raise ValueError(f"Field {field!r} cannot be toggled")

        column = getattr(Note, field)
        result = await self.session.execute(
            update(Note)
            .where(Note.id == id)
            .values({field: not_(column)})
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0

    async def delete_by_id(self, id: str) -> bool:
        """
        Permanently delete a note regardless of its trash state.

        Returns:
            True if a row was deleted.
        """
        result = await self.session.execute(
            delete(Note)
            .where(Note.id == id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0

    async def purge_trashed_before(self, cutoff: datetime) -> int:
        """
        Permanently delete trashed notes whose deleted_at is at or before cutoff.

        Returns:
            Number of notes removed.
        """
        result = await self.session.execute(
            delete(Note)
            .where(Note.deleted == True)  # noqa: E712
            .where(Note.deleted_at <= cutoff)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def count_trashed_before(self, cutoff: datetime) -> int:
        """Count trashed notes that purge_trashed_before(cutoff) would remove."""
        result = await self.session.execute(
            select(func.count())
            .select_from(Note)
            .where(Note.deleted == True)  # noqa: E712
            .where(Note.deleted_at <= cutoff)
        )
        return result.scalar_one()
