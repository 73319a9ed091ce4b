"""RefreshTokenRepository protocol for refresh token persistence.

Port (interface) for hexagonal architecture.
Infrastructure layer implements this protocol.

The store only ever sees keyed digests of refresh secrets. It does not
judge expiry or revocation on lookup; that is the caller's decision.

Reference:
    - src/application/services/session_service.py (rotation and reuse detection)
"""

from typing import Protocol
from uuid import UUID

from src.core.result import Result
from src.domain.entities.refresh_token import RefreshToken
from src.domain.enums import RevocationReason
from src.domain.errors import RefreshTokenStoreError


class RefreshTokenRepository(Protocol):
    """Refresh token repository protocol (port).

    Implementations:
        - InMemoryRefreshTokenRepository: asyncio.Lock guarded dict
        - RefreshTokenRepository (SQLAlchemy): one transaction per call

    Error codes:
        REFRESH_TOKEN_NOT_FOUND, REFRESH_TOKEN_ALREADY_EXISTS,
        STORAGE_UNAVAILABLE.
    """

    async def create(
        self, token: RefreshToken
    ) -> Result[RefreshToken, RefreshTokenStoreError]:
        """Persist a new refresh token record.

        Returns:
            Success(token) or Failure(REFRESH_TOKEN_ALREADY_EXISTS) on a digest
            collision (hard error, never retried).
        """
        ...

    async def find_by_hash(
        self, token_hash: str
    ) -> Result[RefreshToken, RefreshTokenStoreError]:
        """Look up a record by digest, including revoked and expired ones.

        Returns:
            Success(token) or Failure(REFRESH_TOKEN_NOT_FOUND).
        """
        ...

    async def revoke(
        self, token_hash: str, *, reason: RevocationReason
    ) -> Result[bool, RefreshTokenStoreError]:
        """Revoke a record idempotently.

        Returns:
            Success(True) if this call revoked it, Success(False) if it was
            already revoked, Failure(REFRESH_TOKEN_NOT_FOUND) for an unknown
            digest.
        """
        ...

    async def revoke_all_for_user(
        self, user_id: UUID, *, reason: RevocationReason
    ) -> Result[int, RefreshTokenStoreError]:
        """Revoke every live record of a user.

        Best effort against a concurrent create for the same user.

        Returns:
            Success(number of records revoked by this call).
        """
        ...
