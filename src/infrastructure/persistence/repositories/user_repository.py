"""UserRepository - SQLAlchemy implementation of UserRepository protocol.

Adapter for hexagonal architecture.
Maps between domain User entities and database UserModel. Read-only: the
session engine never writes users.
"""

from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.exc import SQLAlchemyError

from src.core.enums import ErrorCode
from src.core.result import Failure, Result, Success
from src.domain.entities.user import User
from src.domain.enums import UserStatus
from src.domain.errors import UserLookupError
from src.infrastructure.persistence.database import Database
from src.infrastructure.persistence.models.user import UserModel


class UserRepository:
    """SQLAlchemy implementation of UserRepository protocol.

    This class does NOT inherit from UserRepository protocol (Protocol uses
    structural typing).

    Attributes:
        database: Database providing transactional sessions.

    Example:
        >>> repo = UserRepository(database=get_database())
        >>> result = await repo.find_by_email("user@example.com")
    """

    def __init__(self, database: Database) -> None:
        """Initialize repository with the database manager.

        Args:
            database: Database manager.
        """
        self.database = database

    async def find_by_id(self, user_id: UUID) -> Result[User, UserLookupError]:
        """Find user by ID.

        Args:
            user_id: User's unique identifier.

        Returns:
            Success(User), Failure(USER_NOT_FOUND) or Failure(STORAGE_UNAVAILABLE).
        """
        return await self._find_one(select(UserModel).where(UserModel.id == user_id))

    async def find_by_email(self, email: str) -> Result[User, UserLookupError]:
        """Find user by email address.

        Emails are stored lowercase, so the lookup lowercases its input and
        uses an exact match that the unique index serves.

        Args:
            email: User's email address.

        Returns:
            Success(User), Failure(USER_NOT_FOUND) or Failure(STORAGE_UNAVAILABLE).
        """
        stmt = select(UserModel).where(UserModel.email == email.strip().lower())
        return await self._find_one(stmt)

    async def _find_one(
        self, stmt: Select[tuple[UserModel]]
    ) -> Result[User, UserLookupError]:
        try:
            async with self.database.get_session() as session:
                result = await session.execute(stmt)
                user_model = result.scalar_one_or_none()
        except SQLAlchemyError as exc:
            return Failure(
                error=UserLookupError(
                    code=ErrorCode.STORAGE_UNAVAILABLE,
                    message="User storage unavailable",
                    cause=exc,
                )
            )

        if user_model is None:
            return Failure(
                error=UserLookupError(
                    code=ErrorCode.USER_NOT_FOUND,
                    message="User not found",
                )
            )
        return Success(value=self._to_domain(user_model))

    def _to_domain(self, user_model: UserModel) -> User:
        """Convert database model to domain entity.

        Args:
            user_model: SQLAlchemy UserModel instance.

        Returns:
            Domain User entity.
        """
        return User(
            id=user_model.id,
            email=user_model.email,
            password_hash=user_model.password_hash,
            role=user_model.role,
            status=UserStatus(user_model.status),
            name=user_model.name,
            created_at=user_model.created_at,
            updated_at=user_model.updated_at,
        )
