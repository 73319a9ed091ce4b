"""In-memory refresh token repository.

Records are kept in a dict keyed by digest and guarded by one asyncio.Lock,
so create, revoke and revoke-all are each atomic with respect to one
another. Callers receive copies; mutating a returned record never changes
the stored one.
"""

import asyncio
from collections.abc import Callable
from dataclasses import replace
from datetime import UTC, datetime
from uuid import UUID

from src.core.enums import ErrorCode
from src.core.result import Failure, Result, Success
from src.domain.entities.refresh_token import RefreshToken
from src.domain.enums import RevocationReason
from src.domain.errors import RefreshTokenStoreError


class InMemoryRefreshTokenRepository:
    """Dict-backed RefreshTokenRepository.

    Usage:
        repo = InMemoryRefreshTokenRepository()
        await repo.create(token)
        result = await repo.find_by_hash(token.token_hash)

    Note:
        Not suitable for multiple processes. Use the SQLAlchemy repository
        when sessions must survive restarts or be shared.
    """

    def __init__(self, clock: Callable[[], datetime] | None = None) -> None:
        """Initialize empty storage.

        Args:
            clock: Source of the revocation instant (defaults to UTC now).
        """
        self._tokens: dict[str, RefreshToken] = {}
        self._lock = asyncio.Lock()
        self._clock = clock or (lambda: datetime.now(UTC))

    async def create(
        self, token: RefreshToken
    ) -> Result[RefreshToken, RefreshTokenStoreError]:
        """Store a new record; a digest collision is a hard error."""
        async with self._lock:
            if token.token_hash in self._tokens:
                return Failure(
                    error=RefreshTokenStoreError(
                        code=ErrorCode.REFRESH_TOKEN_ALREADY_EXISTS,
                        message="Refresh token already exists",
                    )
                )
            self._tokens[token.token_hash] = replace(token)
        return Success(value=token)

    async def find_by_hash(
        self, token_hash: str
    ) -> Result[RefreshToken, RefreshTokenStoreError]:
        """Return a copy of the record, revoked and expired included."""
        async with self._lock:
            token = self._tokens.get(token_hash)
            if token is None:
                return _not_found()
            return Success(value=replace(token))

    async def revoke(
        self, token_hash: str, *, reason: RevocationReason
    ) -> Result[bool, RefreshTokenStoreError]:
        """Revoke idempotently; True only for the call that revoked it."""
        async with self._lock:
            token = self._tokens.get(token_hash)
            if token is None:
                return _not_found()
            return Success(value=token.revoke(reason, self._clock()))

    async def revoke_all_for_user(
        self, user_id: UUID, *, reason: RevocationReason
    ) -> Result[int, RefreshTokenStoreError]:
        """Revoke every live record of the user."""
        async with self._lock:
            now = self._clock()
            revoked = sum(
                token.revoke(reason, now)
                for token in self._tokens.values()
                if token.user_id == user_id
            )
        return Success(value=revoked)


def _not_found() -> Failure[RefreshTokenStoreError]:
    return Failure(
        error=RefreshTokenStoreError(
            code=ErrorCode.REFRESH_TOKEN_NOT_FOUND,
            message="Refresh token not found",
        )
    )
