"""Refresh token service.

Derives the storage key of an opaque refresh secret and the lifetime of a
new refresh token.

Architecture:
    - Implements RefreshTokenServiceProtocol
    - Used by SessionService; the secret itself comes from TokenIssuerProtocol

Token Strategy:
    - Opaque secrets (NOT JWT), 32 random bytes, urlsafe base64
    - Stored as HMAC-SHA256(key=refresh_token_salt, msg=secret) hex digest,
      so lookup is a deterministic equality match on the digest
    - A leaked database does not reveal usable secrets without the key
    - Remember-me sessions get the configured lifetime; others get 7 days,
      or half the configured lifetime when that is shorter than 14 days
"""

import hashlib
import hmac
from datetime import timedelta

SHORT_SESSION_TTL = timedelta(days=7)
SHORT_SESSION_THRESHOLD = timedelta(days=14)


class RefreshTokenService:
    """Refresh secret digest and lifetime policy.

    Usage:
        service = RefreshTokenService(salt=settings.refresh_token_salt)

        token_hash = service.hash_token(secret)
        expires_at = now + service.token_ttl(persistent=command.remember_me)
    """

    def __init__(self, salt: str, expiration_days: int = 30) -> None:
        """Initialize refresh token service.

        Args:
            salt: Key for the HMAC digest (at least 16 characters).
            expiration_days: Lifetime of remember-me sessions (default: 30).

        Raises:
            ValueError: If the salt is too short or the lifetime not positive.
        """
        if len(salt) < 16:
            msg = "Refresh token salt must be at least 16 characters"
            raise ValueError(msg)
        if expiration_days <= 0:
            msg = "Refresh token expiration must be positive"
            raise ValueError(msg)

        self._key = salt.encode("utf-8")
        self._expiration = timedelta(days=expiration_days)

    def hash_token(self, token: str) -> str:
        """Return the keyed digest of a refresh secret.

        Example:
            >>> service = RefreshTokenService(salt="s" * 16)
            >>> service.hash_token("abc") == service.hash_token("abc")
            True
            >>> len(service.hash_token("abc"))
            64
        """
        return hmac.new(self._key, token.encode("utf-8"), hashlib.sha256).hexdigest()

    def token_ttl(self, *, persistent: bool) -> timedelta:
        """Return the lifetime for a new refresh token.

        Args:
            persistent: True for "remember me" sessions.
        """
        if persistent:
            return self._expiration
        if self._expiration >= SHORT_SESSION_THRESHOLD:
            return SHORT_SESSION_TTL
        return self._expiration / 2
