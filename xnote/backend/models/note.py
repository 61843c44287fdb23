"""
Note Model.

A note is owned by a user through the owner's email (no foreign key).
Its trash state is carried by the deleted/deleted_at pair, which the
CHECK constraint keeps consistent: deleted_at is set iff deleted is true.
"""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from xnote.backend.models.base import Base, TimestampMixin, UUIDMixin

DEFAULT_NOTE_COLOR = "#ffffff"


class Note(UUIDMixin, TimestampMixin, Base):
    """Note database model."""

    __tablename__ = "notes"
    __table_args__ = (
        CheckConstraint(
            "(deleted AND deleted_at IS NOT NULL) OR (NOT deleted AND deleted_at IS NULL)",
            name="ck_notes_deleted_at_matches_deleted",
        ),
        Index("ix_notes_email_deleted", "email", "deleted"),
        Index("ix_notes_deleted_deleted_at", "deleted", "deleted_at"),
    )

    email: Mapped[str] = mapped_column(String(320), nullable=False)
    title: Mapped[str] = mapped_column(Text, default="", nullable=False)
    content: Mapped[str] = mapped_column(Text, default="", nullable=False)
    color: Mapped[str] = mapped_column(String(32), default=DEFAULT_NOTE_COLOR, nullable=False)
    pinned: Mapped[bool] = mapped_column(default=False, nullable=False)
    archived: Mapped[bool] = mapped_column(default=False, nullable=False)
    deleted: Mapped[bool] = mapped_column(default=False, nullable=False)
    deleted_at: Mapped[datetime | None] = mapped_column(
        DateTime,
        default=None,
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, title={self.title!r}, deleted={self.deleted})>"
