"""UserRepository protocol for user lookup.

The session engine only reads users. Lookups report an absent user and a
backend failure as distinct error codes so that the session service can
merge the former into INVALID_CREDENTIALS and surface the latter as
STORAGE_UNAVAILABLE.
"""

from typing import Protocol
from uuid import UUID

from src.core.result import Result
from src.domain.entities.user import User
from src.domain.errors import UserLookupError


class UserRepository(Protocol):
    """User lookup protocol (port).

    Implementations:
        - InMemoryUserRepository
        - UserRepository (SQLAlchemy)

    Error codes:
        USER_NOT_FOUND, STORAGE_UNAVAILABLE.
    """

    async def find_by_email(self, email: str) -> Result[User, UserLookupError]:
        """Find user by normalized email address."""
        ...

    async def find_by_id(self, user_id: UUID) -> Result[User, UserLookupError]:
        """Find user by ID."""
        ...
