"""In-memory user repository.

Seeded through ``add``; lookups never fail with STORAGE_UNAVAILABLE.
"""

from dataclasses import replace
from uuid import UUID

from src.core.enums import ErrorCode
from src.core.result import Failure, Result, Success
from src.domain.entities.user import User
from src.domain.errors import UserLookupError


class InMemoryUserRepository:
    """Dict-backed UserRepository.

    Usage:
        users = InMemoryUserRepository()
        users.add(User(id=uuid7(), email="alice@example.com", password_hash=digest))
    """

    def __init__(self, users: list[User] | None = None) -> None:
        """Initialize storage, optionally seeded with users."""
        self._by_id: dict[UUID, User] = {}
        for user in users or []:
            self.add(user)

    def add(self, user: User) -> None:
        """Insert or replace a user (email stored lowercase)."""
        self._by_id[user.id] = replace(user, email=user.email.strip().lower())

    async def find_by_id(self, user_id: UUID) -> Result[User, UserLookupError]:
        """Find user by ID."""
        user = self._by_id.get(user_id)
        if user is None:
            return _not_found()
        return Success(value=replace(user))

    async def find_by_email(self, email: str) -> Result[User, UserLookupError]:
        """Find user by email (case-insensitive)."""
        wanted = email.strip().lower()
        for user in self._by_id.values():
            if user.email == wanted:
                return Success(value=replace(user))
        return _not_found()


def _not_found() -> Failure[UserLookupError]:
    return Failure(
        error=UserLookupError(code=ErrorCode.USER_NOT_FOUND, message="User not found")
    )
