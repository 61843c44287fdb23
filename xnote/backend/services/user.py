"""
User Service.

Registration, login and profile management. Passwords are hashed with
bcrypt on the way in and verified against the hash on login.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from xnote.backend.core.exceptions import AuthenticationError, ConflictError
from xnote.backend.core.security import hash_password, verify_password
from xnote.backend.models.user import User
from xnote.backend.repositories.user import UserRepository
from xnote.backend.schemas.user import UserLogin, UserProfileUpdate, UserRegister
from xnote.backend.services.base import BaseService


class UserService(BaseService):
    """Service for user accounts."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = UserRepository(session)

    async def register(self, data: UserRegister) -> User:
        """
        Create a new account.

        Raises:
            ConflictError: If the email or username is already registered
        """
        if await self.repo.exists_by_email_or_username(data.email, data.username):
            raise ConflictError("Email or username already registered")

        self._log_operation("Registering user", email=data.email)

        return await self._execute_db_operation(
            "register_user",
            self.repo.create(
                username=data.username,
                email=data.email,
                hashed_password=hash_password(data.password),
                photo=data.photo,
            ),
        )

    async def authenticate(self, data: UserLogin) -> User:
        """
        Check credentials.

        Raises:
            AuthenticationError: If the email is unknown or the password does not match
        """
        user = await self.repo.get_by_email_or_none(data.email)
        if user is None or not verify_password(data.password, user.hashed_password):
            self._logger.warning("Login failed", extra={"email": data.email})
            raise AuthenticationError("Invalid email or password")

        self._log_operation("User logged in", user_id=user.id)
        return user

    async def get_profile(self, email: str) -> User:
        """
        Raises:
            NotFoundError: If no user has this email
        """
        return await self.repo.get_by_email(email)

    async def update_profile(self, email: str, data: UserProfileUpdate) -> User:
        """
        Merge provided profile fields. A new password is re-hashed.

        Raises:
            NotFoundError: If no user has this email
            ConflictError: If the new username belongs to someone else
        """
        user = await self.repo.get_by_email(email)

        update_data = data.model_dump(exclude_unset=True, exclude_none=True)
        if not update_data:
            return user

        if "username" in update_data and await self.repo.username_taken_by_other(
            update_data["username"], email
        ):
            raise ConflictError("Username already taken")

        if "password" in update_data:
            update_data["hashed_password"] = hash_password(update_data.pop("password"))

        self._log_operation("Updating profile", user_id=user.id, fields=sorted(update_data))

        return await self._execute_db_operation(
            "update_profile",
            self.repo.update_instance(user, **update_data),
        )

    async def list_users(self) -> list[User]:
        return await self._execute_db_operation("list_users", self.repo.list_users())
