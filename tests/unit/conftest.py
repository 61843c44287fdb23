"""
Unit Test Fixtures.

Fixtures for unit tests - all external dependencies are mocked.
Unit tests should be fast and isolated, never touching real databases.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

import pytest


# =============================================================================
# Database Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_db_session() -> AsyncMock:
    """
    Mock database session for unit tests.

    Usage:
        def test_service(mock_db_session: AsyncMock):
            service = NoteService(mock_db_session)
    """
    session = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.execute = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def mock_database(mock_db_session: AsyncMock) -> MagicMock:
    """
    Mock Database whose session() context manager yields mock_db_session.

    Usage:
        scheduler = TrashScheduler(mock_database)
    """

    @asynccontextmanager
    async def _session() -> AsyncGenerator[AsyncMock, None]:
        yield mock_db_session

    database = MagicMock()
    database.session = _session
    return database


# =============================================================================
# Model Mock Fixtures
# =============================================================================


def build_note(**overrides) -> MagicMock:
    """A note-shaped mock with active defaults."""
    note = MagicMock()
    note.id = "note-123"
    note.email = "u@e.com"
    note.title = "A"
    note.content = "x"
    note.color = "#ffffff"
    note.pinned = False
    note.archived = False
    note.deleted = False
    note.deleted_at = None
    note.created_at = datetime(2026, 1, 1)
    note.updated_at = datetime(2026, 1, 1)
    for key, value in overrides.items():
        setattr(note, key, value)
    return note


@pytest.fixture
def note_factory():
    """Provide build_note for creating note mocks."""
    return build_note


# =============================================================================
# Logging Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_logger() -> MagicMock:
    """
    Mock logger for testing logging calls.

    Usage:
        def test_logging(mock_logger):
            with patch("module.logger", mock_logger):
                # Test code that logs
                mock_logger.info.assert_called_once()
    """
    logger = MagicMock()
    logger.debug = MagicMock()
    logger.info = MagicMock()
    logger.warning = MagicMock()
    logger.error = MagicMock()
    logger.exception = MagicMock()
    return logger
