"""
FastAPI Dependencies.

Shared dependencies for request handling. Services are built per request
around a session from the Database the lifespan placed on app.state.
"""

import uuid
from typing import Annotated

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from xnote.backend.core.database import get_db_session
from xnote.backend.services.note import NoteService
from xnote.backend.services.user import UserService

# Type alias for database session dependency
DbSession = Annotated[AsyncSession, Depends(get_db_session)]


async def get_request_id(x_request_id: str | None = Header(None)) -> str:
    """
    Extract or generate request ID from headers.

    Used for request tracing and correlation.
    """
    return x_request_id or str(uuid.uuid4())


RequestId = Annotated[str, Depends(get_request_id)]


async def get_note_service(db: DbSession) -> NoteService:
    return NoteService(db)


async def get_user_service(db: DbSession) -> UserService:
    return UserService(db)


NoteServiceDep = Annotated[NoteService, Depends(get_note_service)]
UserServiceDep = Annotated[UserService, Depends(get_user_service)]


def get_base_url(request: Request) -> str:
    """Public base URL of this server, without trailing slash."""
    return str(request.base_url).rstrip("/")


BaseUrl = Annotated[str, Depends(get_base_url)]
