# Importing the models registers their tables on Base.metadata
from xnote.backend.models.base import Base
from xnote.backend.models.note import Note
from xnote.backend.models.user import User

__all__ = ["Base", "Note", "User"]
