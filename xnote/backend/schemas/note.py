"""
Note Schemas.

Pydantic schemas for note API request/response validation.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class NoteCreate(BaseModel):
    """Schema for creating a new note. Lifecycle fields cannot be set here."""

    email: str = Field(
        ...,
        min_length=1,
        description="Owner email",
        examples=["u@e.com"],
    )
    title: str = Field(default="", description="Note title", examples=["Groceries"])
    content: str = Field(default="", description="Note content")
    color: str = Field(default="#ffffff", description="Background color")
    pinned: bool = Field(default=False, description="Pin status")
    archived: bool = Field(default=False, description="Archive status")


class NoteUpdate(BaseModel):
    """
    Schema for partially updating a note.

    Only fields present in the request body are merged. deleted and
    deleted_at are not accepted: they change only through trash/restore.
    """

    email: str | None = Field(default=None, min_length=1)
    title: str | None = None
    content: str | None = None
    color: str | None = None
    pinned: bool | None = None
    archived: bool | None = None


class NoteResponse(BaseModel):
    """Schema for note in API responses."""

    id: str = Field(description="Note unique identifier")
    email: str = Field(description="Owner email")
    title: str
    content: str
    color: str
    pinned: bool
    archived: bool
    deleted: bool = Field(description="Whether the note is in the trash")
    deleted_at: datetime | None = Field(description="When the note was moved to trash")
    created_at: datetime = Field(description="Creation timestamp")
    updated_at: datetime = Field(description="Last update timestamp")

    model_config = ConfigDict(from_attributes=True)
