"""
User Repository.

Data access layer for user accounts.
"""

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from xnote.backend.core.exceptions import NotFoundError
from xnote.backend.models.user import User
from xnote.backend.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository for User model."""

    model = User

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def get_by_email_or_none(self, email: str) -> User | None:
        result = await self.session.execute(
            select(User).where(User.email == email)
        )
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> User:
        """
        Get a user by email.

        Raises:
            NotFoundError: If no user has this email
        """
        user = await self.get_by_email_or_none(email)
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def exists_by_email_or_username(self, email: str, username: str) -> bool:
        result = await self.session.execute(
            select(User.id).where(or_(User.email == email, User.username == username))
        )
        return result.first() is not None

    async def username_taken_by_other(self, username: str, email: str) -> bool:
        """Whether a user other than the owner of email already uses username."""
        result = await self.session.execute(
            select(User.id).where(User.username == username, User.email != email)
        )
        return result.first() is not None

    async def list_users(self) -> list[User]:
        """All users, oldest account first."""
        result = await self.session.execute(
            select(User).order_by(User.created_at.asc())
        )
        return list(result.scalars().all())
