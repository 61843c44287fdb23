"""
API Router.

Aggregates all endpoint routers under /api.
"""

from fastapi import APIRouter

from xnote.backend.api.endpoints import notes, users

router = APIRouter()

# User endpoints
router.include_router(users.router, prefix="/users", tags=["users"])

# Notes endpoints
router.include_router(notes.router, prefix="/notes", tags=["notes"])
