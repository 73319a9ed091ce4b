"""Refresh token domain entity.

A refresh token record is the server-side half of a long-lived session.
The client holds the opaque secret; the store holds only its keyed digest.

Lifecycle:
    1. Created on login (or on rotation during refresh)
    2. Looked up by digest on refresh
    3. Revoked on logout, rotation or reuse detection (revoked_at never unset)
    4. Expires naturally at expires_at; rows are never deleted by the engine
"""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from uuid import UUID

from src.domain.enums import RevocationReason


@dataclass
class RefreshToken:
    """Refresh token record (entity).

    Attributes:
        id: Unique record identifier.
        user_id: Owner of the session.
        token_hash: Hex HMAC-SHA256 digest of the secret (unique).
        expires_at: Absolute expiry instant (UTC).
        created_at: Creation instant (UTC).
        revoked_at: Revocation instant, None while live.
        revoked_reason: Why the token was revoked, None while live.
    """

    id: UUID
    user_id: UUID
    token_hash: str
    expires_at: datetime
    created_at: datetime
    revoked_at: datetime | None = None
    revoked_reason: RevocationReason | None = None

    @property
    def lifetime(self) -> timedelta:
        """Length of the session this token was issued for."""
        return self.expires_at - self.created_at

    def is_revoked(self) -> bool:
        """Check whether the token has been revoked."""
        return self.revoked_at is not None

    def is_expired(self, now: datetime | None = None) -> bool:
        """Check whether the token has reached its expiry instant.

        Args:
            now: Reference instant (defaults to current UTC time).
        """
        current = now or datetime.now(UTC)
        return current >= self.expires_at

    def is_usable(self, now: datetime | None = None) -> bool:
        """A token is usable iff it is neither revoked nor expired."""
        return not self.is_revoked() and not self.is_expired(now)

    def revoke(self, reason: RevocationReason, now: datetime | None = None) -> bool:
        """Mark the token revoked.

        Revocation is one-way: an already revoked token keeps its original
        instant and reason.

        Returns:
            True if this call performed the transition.
        """
        if self.revoked_at is not None:
            return False
        self.revoked_at = now or datetime.now(UTC)
        self.revoked_reason = reason
        return True

    def __repr__(self) -> str:
        """Representation without the digest."""
        return (
            f"RefreshToken(id={self.id!s}, user_id={self.user_id!s}, "
            f"expires_at={self.expires_at.isoformat()}, "
            f"revoked={self.revoked_at is not None})"
        )
