"""
Notes API Endpoints.

REST API endpoints for notes: CRUD, pin/archive toggles and the trash.
"""

from fastapi import APIRouter

from xnote.backend.core.dependencies import NoteServiceDep, RequestId
from xnote.backend.schemas.base import ApiResponse
from xnote.backend.schemas.note import NoteCreate, NoteResponse, NoteUpdate

router = APIRouter()


def _note_response(note, message: str | None = None) -> ApiResponse[NoteResponse]:
    return ApiResponse(message=message, data=NoteResponse.model_validate(note))


def _note_list_response(notes) -> ApiResponse[list[NoteResponse]]:
    return ApiResponse(data=[NoteResponse.model_validate(note) for note in notes])


@router.get(
    "",
    response_model=ApiResponse[list[NoteResponse]],
    summary="List active notes",
    description="All notes not in the trash, across users, newest first.",
)
async def list_notes(
    service: NoteServiceDep,
    request_id: RequestId,
) -> ApiResponse[list[NoteResponse]]:
    """List all active notes."""
    return _note_list_response(await service.list_notes())


@router.get(
    "/trash/{email}",
    response_model=ApiResponse[list[NoteResponse]],
    summary="List trashed notes",
    description="Notes of a user that are in the trash, most recently trashed first.",
)
async def list_trash(
    email: str,
    service: NoteServiceDep,
    request_id: RequestId,
) -> ApiResponse[list[NoteResponse]]:
    """List a user's trash."""
    return _note_list_response(await service.list_trash(email))


@router.get(
    "/{email}",
    response_model=ApiResponse[list[NoteResponse]],
    summary="List a user's notes",
    description="Active notes of a user, pinned first, then newest first.",
)
async def list_user_notes(
    email: str,
    service: NoteServiceDep,
    request_id: RequestId,
) -> ApiResponse[list[NoteResponse]]:
    """List a user's active notes."""
    return _note_list_response(await service.list_user_notes(email))


@router.post(
    "",
    response_model=ApiResponse[NoteResponse],
    status_code=201,
    summary="Create a note",
)
async def create_note(
    data: NoteCreate,
    service: NoteServiceDep,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    """Create a new note."""
    note = await service.create_note(data)
    return _note_response(note, "Note created successfully")


@router.put(
    "/{note_id}",
    response_model=ApiResponse[NoteResponse],
    summary="Update a note",
    description="Merge the provided fields into the note.",
)
async def update_note(
    note_id: str,
    data: NoteUpdate,
    service: NoteServiceDep,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    """Update a note."""
    note = await service.update_note(note_id, data)
    return _note_response(note, "Note updated successfully")


@router.delete(
    "/{note_id}",
    response_model=ApiResponse[None],
    summary="Delete a note forever",
    description="Permanently delete a note, bypassing the trash.",
)
async def delete_note(
    note_id: str,
    service: NoteServiceDep,
    request_id: RequestId,
) -> ApiResponse[None]:
    """Delete a note permanently."""
    await service.delete_note_forever(note_id)
    return ApiResponse(message="Note deleted successfully (permanently)")


@router.patch(
    "/{note_id}/pin",
    response_model=ApiResponse[NoteResponse],
    summary="Toggle pin",
)
async def toggle_pin(
    note_id: str,
    service: NoteServiceDep,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    """Flip the pinned flag."""
    note = await service.toggle_pin(note_id)
    return _note_response(note, "Note pin toggled")


@router.patch(
    "/{note_id}/archive",
    response_model=ApiResponse[NoteResponse],
    summary="Toggle archive",
)
async def toggle_archive(
    note_id: str,
    service: NoteServiceDep,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    """Flip the archived flag."""
    note = await service.toggle_archive(note_id)
    return _note_response(note, "Note archive toggled")


@router.put(
    "/{note_id}/trash",
    response_model=ApiResponse[NoteResponse],
    summary="Move a note to the trash",
)
async def trash_note(
    note_id: str,
    service: NoteServiceDep,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    """Soft-delete a note."""
    note = await service.trash_note(note_id)
    return _note_response(note, "Note moved to trash")


@router.put(
    "/{note_id}/restore",
    response_model=ApiResponse[NoteResponse],
    summary="Restore a note from the trash",
)
async def restore_note(
    note_id: str,
    service: NoteServiceDep,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    """Restore a trashed note."""
    note = await service.restore_note(note_id)
    return _note_response(note, "Note restored from trash")
