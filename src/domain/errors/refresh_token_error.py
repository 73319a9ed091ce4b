"""Refresh token store error types.

Usage:
    from src.domain.errors import RefreshTokenStoreError

    match await repo.find_by_hash(token_hash):
        case Failure(error=error) if error.code == ErrorCode.REFRESH_TOKEN_NOT_FOUND:
            ...
"""

from dataclasses import dataclass

from src.core.errors import DomainError


@dataclass(frozen=True, slots=True, kw_only=True)
class RefreshTokenStoreError(DomainError):
    """Refresh token persistence failure.

    Codes:
        REFRESH_TOKEN_NOT_FOUND: No record for the digest.
        REFRESH_TOKEN_ALREADY_EXISTS: Digest collision on create (not retried).
        STORAGE_UNAVAILABLE: Backend failure.
    """

    pass  # Inherits all fields from DomainError
