"""
Note Service.

Business logic layer for notes: CRUD, pin/archive toggles and the trash
lifecycle. Every lifecycle move is validated by transition() before it is
written, and the write itself is guarded on the state that was validated.
"""

from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from xnote.backend.core.exceptions import ConflictError, NotFoundError
from xnote.backend.core.utils import utc_now
from xnote.backend.models.note import Note
from xnote.backend.repositories.note import NoteRepository
from xnote.backend.schemas.note import NoteCreate, NoteUpdate
from xnote.backend.services.base import BaseService
from xnote.backend.services.trash import TrashAction, note_state, transition


class NoteService(BaseService):
    """
    Service for note business logic.

    Toggles are allowed on trashed notes as well; they flip the flag and
    leave the trash state alone.
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = NoteRepository(session)

    async def create_note(self, data: NoteCreate) -> Note:
        """
        Create a new active note.

        Args:
            data: Note creation data

        Returns:
            Created note
        """
        self._log_operation("Creating note", email=data.email)

        note = await self._execute_db_operation(
            "create_note",
            self.repo.create(**data.model_dump()),
        )

        self._log_debug("Note created", note_id=note.id)
        return note

    async def get_note(self, note_id: str) -> Note:
        """
        Raises:
            NotFoundError: If note not found
        """
        return await self._get_or_raise(note_id)

    async def list_notes(self) -> list[Note]:
        """All active notes across users, newest first."""
        return await self._execute_db_operation("list_notes", self.repo.list_active())

    async def list_user_notes(self, email: str) -> list[Note]:
        """Active notes of one user, pinned first, then newest first."""
        return await self._execute_db_operation(
            "list_user_notes",
            self.repo.list_active_for_owner(email),
        )

    async def list_trash(self, email: str) -> list[Note]:
        """Trashed notes of one user, most recently trashed first."""
        return await self._execute_db_operation(
            "list_trash",
            self.repo.list_trashed_for_owner(email),
        )

    async def update_note(self, note_id: str, data: NoteUpdate) -> Note:
        """
        Merge the provided fields into a note.

        Args:
            note_id: Note ID to update
            data: Update data (only fields present in the request are written)

        Returns:
            Updated note

        Raises:
            NotFoundError: If note not found
        """
        update_data = data.model_dump(exclude_unset=True, exclude_none=True)

        if not update_data:
            return await self._get_or_raise(note_id)

        self._log_operation(
            "Updating note",
            note_id=note_id,
            fields=list(update_data.keys()),
        )

        note = await self._get_or_raise(note_id)
        return await self._execute_db_operation(
            "update_note",
            self.repo.update_instance(note, **update_data),
        )

    async def delete_note_forever(self, note_id: str) -> None:
        """
        Permanently delete a note, whether active or trashed.

        Raises:
            NotFoundError: If note not found
        """
        self._log_operation("Deleting note permanently", note_id=note_id)

        deleted = await self._execute_db_operation(
            "delete_note_forever",
            self.repo.delete_by_id(note_id),
        )
        if not deleted:
            raise NotFoundError("Note not found")

    async def toggle_pin(self, note_id: str) -> Note:
        """
        Flip the pinned flag.

        Raises:
            NotFoundError: If note not found
        """
        return await self._toggle(note_id, "pinned")

    async def toggle_archive(self, note_id: str) -> Note:
        """
        Flip the archived flag.

        Raises:
            NotFoundError: If note not found
        """
        return await self._toggle(note_id, "archived")

    async def trash_note(self, note_id: str, now: datetime | None = None) -> Note:
        """
        Move an active note to the trash.

        Args:
            note_id: Note ID
            now: Time recorded as deleted_at (defaults to the current UTC time)

        Raises:
            NotFoundError: If note not found
            InvalidTransitionError: If the note is already in the trash
        """
        note = await self._get_or_raise(note_id)
        transition(note_state(note), TrashAction.TRASH)

        self._log_operation("Moving note to trash", note_id=note_id)
        updated = await self._execute_db_operation(
            "trash_note",
            self.repo.update_if_deleted_is(
                note_id,
                expected_deleted=False,
                deleted=True,
                deleted_at=now or utc_now(),
            ),
        )
        if not updated:
            await self._raise_lost_race(note_id, TrashAction.TRASH)

        return await self._get_or_raise(note_id)

    async def restore_note(self, note_id: str) -> Note:
        """
        Bring a trashed note back to the active state.

        Raises:
            NotFoundError: If note not found
            InvalidTransitionError: If the note is not in the trash
        """
        note = await self._get_or_raise(note_id)
        transition(note_state(note), TrashAction.RESTORE)

        self._log_operation("Restoring note from trash", note_id=note_id)
        updated = await self._execute_db_operation(
            "restore_note",
            self.repo.update_if_deleted_is(
                note_id,
                expected_deleted=True,
                deleted=False,
                deleted_at=None,
            ),
        )
        if not updated:
            await self._raise_lost_race(note_id, TrashAction.RESTORE)

        return await self._get_or_raise(note_id)

    async def _toggle(self, note_id: str, field: str) -> Note:
        self._log_operation("Toggling note flag", note_id=note_id, field=field)

        updated = await self._execute_db_operation(
            f"toggle_{field}",
            self.repo.toggle(note_id, field),
        )
        if not updated:
            raise NotFoundError("Note not found")

        return await self._get_or_raise(note_id)

    async def _get_or_raise(self, note_id: str) -> Note:
        note = await self._execute_db_operation(
            "get_note",
            self.repo.get_by_id_or_none(note_id),
        )
        if note is None:
            raise NotFoundError("Note not found")
        return note

    async def _raise_lost_race(self, note_id: str, action: TrashAction) -> None:
        """
        Explain why a guarded write matched no row.

        Another request changed or removed the note between validation and
        write; re-validate against what is stored now.
        """
        current = await self.repo.get_by_id_or_none(note_id)
        if current is None:
            raise NotFoundError("Note not found")
        transition(note_state(current), action)
        raise ConflictError("Note was modified concurrently")
