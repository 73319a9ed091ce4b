"""Refresh token service protocol.

Derives the storage key of a refresh secret and the lifetime of a new
refresh token. The secret itself is produced by TokenIssuerProtocol.
"""

from datetime import timedelta
from typing import Protocol


class RefreshTokenServiceProtocol(Protocol):
    """Refresh secret digest and lifetime policy.

    Usage:
        token_hash = refresh_token_service.hash_token(secret)
        ttl = refresh_token_service.token_ttl(persistent=command.remember_me)
    """

    def hash_token(self, token: str) -> str:
        """Return the deterministic keyed digest of a refresh secret."""
        ...

    def token_ttl(self, *, persistent: bool) -> timedelta:
        """Return the lifetime for a new refresh token.

        Args:
            persistent: True for "remember me" sessions.
        """
        ...
