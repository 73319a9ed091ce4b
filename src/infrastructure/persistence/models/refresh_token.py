"""Refresh token database model.

Security:
    - token_hash: HMAC-SHA256 digest of the secret (NEVER plaintext)
    - revoked_at: set once by a conditional UPDATE, never cleared
    - revoked_reason: lets a reused rotated token be recognised as theft
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import DateTime, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.persistence.base import BaseModel


class RefreshTokenModel(BaseModel):
    """Refresh token model for the refresh flow.

    Token Lifecycle:
        1. Inserted on login or rotation
        2. Looked up by token_hash on refresh
        3. Revoked on logout, rotation or reuse detection
        4. Expires naturally at expires_at (rows are kept)

    Indexes:
        - token_hash: unique, for lookup
        - user_id: for revoke-all
        - idx_refresh_tokens_active: (user_id, revoked_at) for live tokens
    """

    __tablename__ = "refresh_tokens"

    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="User who owns this refresh token",
    )
    token_hash: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        unique=True,
        index=True,
        comment="HMAC-SHA256 hex digest of the refresh secret",
    )
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        comment="Timestamp when token expires",
    )
    revoked_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        default=None,
        comment="Timestamp when token was revoked (nullable)",
    )
    revoked_reason: Mapped[str | None] = mapped_column(
        String(32),
        nullable=True,
        default=None,
        comment="Reason for revocation (logout, rotated, reuse_detected, ...)",
    )

    __table_args__ = (Index("idx_refresh_tokens_active", "user_id", "revoked_at"),)

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"<RefreshTokenModel("
            f"id={self.id}, "
            f"user_id={self.user_id}, "
            f"expires_at={self.expires_at}, "
            f"revoked={self.revoked_at is not None}"
            f")>"
        )
