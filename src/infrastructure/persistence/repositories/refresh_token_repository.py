"""RefreshTokenRepository - SQLAlchemy implementation for refresh token persistence.

Every call runs in its own short transaction obtained from Database, so a
record is either fully committed or absent. Revocation is a single
conditional UPDATE, which makes the "claim exactly once" answer of revoke
race-free under concurrent refreshes.
"""

from collections.abc import Callable
from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy import CursorResult, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from src.core.enums import ErrorCode
from src.core.result import Failure, Result, Success
from src.domain.entities.refresh_token import RefreshToken
from src.domain.enums import RevocationReason
from src.domain.errors import RefreshTokenStoreError
from src.infrastructure.persistence.database import Database
from src.infrastructure.persistence.models.refresh_token import RefreshTokenModel


def _aware(value: datetime) -> datetime:
    # SQLite drops tzinfo; stored instants are always UTC
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


def _to_entity(model: RefreshTokenModel) -> RefreshToken:
    """Convert database model to domain entity."""
    return RefreshToken(
        id=model.id,
        user_id=model.user_id,
        token_hash=model.token_hash,
        expires_at=_aware(model.expires_at),
        created_at=_aware(model.created_at),
        revoked_at=_aware(model.revoked_at) if model.revoked_at else None,
        revoked_reason=(
            RevocationReason(model.revoked_reason) if model.revoked_reason else None
        ),
    )


def _to_model(token: RefreshToken) -> RefreshTokenModel:
    """Convert domain entity to database model."""
    return RefreshTokenModel(
        id=token.id,
        user_id=token.user_id,
        token_hash=token.token_hash,
        expires_at=token.expires_at,
        created_at=token.created_at,
        revoked_at=token.revoked_at,
        revoked_reason=token.revoked_reason.value if token.revoked_reason else None,
    )


def _unavailable(exc: SQLAlchemyError) -> Failure[RefreshTokenStoreError]:
    return Failure(
        error=RefreshTokenStoreError(
            code=ErrorCode.STORAGE_UNAVAILABLE,
            message="Refresh token storage unavailable",
            cause=exc,
        )
    )


def _not_found() -> Failure[RefreshTokenStoreError]:
    return Failure(
        error=RefreshTokenStoreError(
            code=ErrorCode.REFRESH_TOKEN_NOT_FOUND,
            message="Refresh token not found",
        )
    )


class RefreshTokenRepository:
    """SQLAlchemy implementation of the RefreshTokenRepository protocol.

    Attributes:
        database: Database providing transactional sessions.

    Example:
        >>> repo = RefreshTokenRepository(database=get_database())
        >>> result = await repo.find_by_hash(token_hash)
    """

    def __init__(
        self,
        database: Database,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize repository.

        Args:
            database: Database manager.
            clock: Source of the revocation instant (defaults to UTC now).
        """
        self.database = database
        self._clock = clock or (lambda: datetime.now(UTC))

    async def create(
        self, token: RefreshToken
    ) -> Result[RefreshToken, RefreshTokenStoreError]:
        """Insert a new refresh token record.

        Args:
            token: Record to persist.

        Returns:
            Success(token), Failure(REFRESH_TOKEN_ALREADY_EXISTS) on a unique
            violation, Failure(STORAGE_UNAVAILABLE) otherwise.
        """
        try:
            async with self.database.get_session() as session:
                session.add(_to_model(token))
        except IntegrityError as exc:
            return Failure(
                error=RefreshTokenStoreError(
                    code=ErrorCode.REFRESH_TOKEN_ALREADY_EXISTS,
                    message="Refresh token already exists",
                    cause=exc,
                )
            )
        except SQLAlchemyError as exc:
            return _unavailable(exc)
        return Success(value=token)

    async def find_by_hash(
        self, token_hash: str
    ) -> Result[RefreshToken, RefreshTokenStoreError]:
        """Find refresh token by digest (revoked and expired included).

        Args:
            token_hash: HMAC digest of the secret.

        Returns:
            Success(token) or Failure(REFRESH_TOKEN_NOT_FOUND).
        """
        stmt = select(RefreshTokenModel).where(
            RefreshTokenModel.token_hash == token_hash
        )
        try:
            async with self.database.get_session() as session:
                result = await session.execute(stmt)
                model = result.scalar_one_or_none()
        except SQLAlchemyError as exc:
            return _unavailable(exc)

        if model is None:
            return _not_found()
        return Success(value=_to_entity(model))

    async def revoke(
        self, token_hash: str, *, reason: RevocationReason
    ) -> Result[bool, RefreshTokenStoreError]:
        """Revoke a token if it is still live.

        Args:
            token_hash: HMAC digest of the secret.
            reason: Recorded revocation reason.

        Returns:
            Success(True) if this call revoked it, Success(False) if it was
            already revoked, Failure(REFRESH_TOKEN_NOT_FOUND) if unknown.
        """
        stmt = (
            update(RefreshTokenModel)
            .where(RefreshTokenModel.token_hash == token_hash)
            .where(RefreshTokenModel.revoked_at.is_(None))
            .values(revoked_at=self._clock(), revoked_reason=reason.value)
        )
        exists_stmt = select(RefreshTokenModel.id).where(
            RefreshTokenModel.token_hash == token_hash
        )
        try:
            async with self.database.get_session() as session:
                result: CursorResult = await session.execute(stmt)  # type: ignore[assignment]
                if result.rowcount:
                    return Success(value=True)
                existing = await session.execute(exists_stmt)
                found = existing.scalar_one_or_none() is not None
        except SQLAlchemyError as exc:
            return _unavailable(exc)

        if not found:
            return _not_found()
        return Success(value=False)

    async def revoke_all_for_user(
        self, user_id: UUID, *, reason: RevocationReason
    ) -> Result[int, RefreshTokenStoreError]:
        """Revoke every live token of a user.

        Args:
            user_id: Owner whose sessions end.
            reason: Recorded revocation reason.

        Returns:
            Success(number of tokens revoked by this call).
        """
        stmt = (
            update(RefreshTokenModel)
            .where(RefreshTokenModel.user_id == user_id)
            .where(RefreshTokenModel.revoked_at.is_(None))
            .values(revoked_at=self._clock(), revoked_reason=reason.value)
        )
        try:
            async with self.database.get_session() as session:
                result: CursorResult = await session.execute(stmt)  # type: ignore[assignment]
                count = result.rowcount or 0
        except SQLAlchemyError as exc:
            return _unavailable(exc)
        return Success(value=count)
