"""
Unit Tests for User Service.

Tests registration, login and profile updates with a mocked repository.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from xnote.backend.core.exceptions import AuthenticationError, ConflictError, NotFoundError
from xnote.backend.core.security import hash_password, verify_password
from xnote.backend.schemas.user import UserLogin, UserProfileUpdate, UserRegister
from xnote.backend.services.user import UserService


@pytest.fixture
def service():
    """Create UserService with mocked session."""
    return UserService(AsyncMock())


def _user(password: str = "secret", **overrides) -> MagicMock:
    user = MagicMock()
    user.id = "user-1"
    user.username = "jane"
    user.email = "jane@example.com"
    user.hashed_password = hash_password(password)
    user.photo = None
    for key, value in overrides.items():
        setattr(user, key, value)
    return user


class TestRegister:
    """Tests for account registration."""

    async def test_register_stores_password_hash(self, service):
        with patch.object(service.repo, "exists_by_email_or_username", return_value=False), \
             patch.object(service.repo, "create", return_value=_user()) as mock_create:
            await service.register(
                UserRegister(username="jane", email="jane@example.com", password="secret")
            )

            kwargs = mock_create.call_args.kwargs
            assert "password" not in kwargs
            assert kwargs["hashed_password"] != "secret"
            assert verify_password("secret", kwargs["hashed_password"])

    async def test_register_duplicate_raises_conflict(self, service):
        with patch.object(service.repo, "exists_by_email_or_username", return_value=True), \
             patch.object(service.repo, "create") as mock_create:
            with pytest.raises(ConflictError, match="already registered"):
                await service.register(
                    UserRegister(username="jane", email="jane@example.com", password="secret")
                )

            mock_create.assert_not_called()


class TestAuthenticate:
    """Tests for login."""

    async def test_valid_credentials_return_user(self, service):
        user = _user()
        with patch.object(service.repo, "get_by_email_or_none", return_value=user):
            result = await service.authenticate(
                UserLogin(email="jane@example.com", password="secret")
            )

            assert result is user

    async def test_wrong_password_raises(self, service):
        with patch.object(service.repo, "get_by_email_or_none", return_value=_user()):
            with pytest.raises(AuthenticationError, match="Invalid email or password"):
                await service.authenticate(
                    UserLogin(email="jane@example.com", password="wrong")
                )

    async def test_unknown_email_raises_same_error(self, service):
        with patch.object(service.repo, "get_by_email_or_none", return_value=None):
            with pytest.raises(AuthenticationError, match="Invalid email or password"):
                await service.authenticate(
                    UserLogin(email="nobody@example.com", password="secret")
                )


class TestUpdateProfile:
    """Tests for profile updates."""

    async def test_new_password_is_rehashed(self, service):
        user = _user()
        with patch.object(service.repo, "get_by_email", return_value=user), \
             patch.object(service.repo, "update_instance", return_value=user) as mock_update:
            await service.update_profile("jane@example.com", UserProfileUpdate(password="new"))

            kwargs = mock_update.call_args.kwargs
            assert "password" not in kwargs
            assert verify_password("new", kwargs["hashed_password"])

    async def test_username_taken_by_other_raises(self, service):
        with patch.object(service.repo, "get_by_email", return_value=_user()), \
             patch.object(service.repo, "username_taken_by_other", return_value=True):
            with pytest.raises(ConflictError, match="Username already taken"):
                await service.update_profile(
                    "jane@example.com", UserProfileUpdate(username="bob")
                )

    async def test_empty_update_returns_user(self, service):
        user = _user()
        with patch.object(service.repo, "get_by_email", return_value=user), \
             patch.object(service.repo, "update_instance") as mock_update:
            result = await service.update_profile("jane@example.com", UserProfileUpdate())

            mock_update.assert_not_called()
            assert result is user

    async def test_unknown_email_raises_not_found(self, service):
        with patch.object(
            service.repo, "get_by_email", side_effect=NotFoundError("User not found")
        ):
            with pytest.raises(NotFoundError):
                await service.update_profile("nobody@example.com", UserProfileUpdate(photo="a.png"))
