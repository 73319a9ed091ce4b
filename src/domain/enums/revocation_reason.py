"""Reasons recorded when a refresh token is revoked.

The reason is stored with the token so that a later presentation of a
revoked token can be classified. A token revoked as ROTATED that is
presented again means the secret leaked and triggers REUSE_DETECTED for
every token of the owner.

Usage:
    from src.domain.enums import RevocationReason

    await refresh_token_repo.revoke(token_hash, reason=RevocationReason.LOGOUT)
"""

from enum import Enum


class RevocationReason(str, Enum):
    """Why a refresh token was revoked."""

    LOGOUT = "logout"
    LOGOUT_ALL = "logout_all"
    ROTATED = "rotated"
    REUSE_DETECTED = "reuse_detected"
    PASSWORD_CHANGED = "password_changed"
