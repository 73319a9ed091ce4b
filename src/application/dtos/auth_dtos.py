"""Session DTOs (Data Transfer Objects).

Response dataclasses returned by SessionService. They carry data back to
the presentation layer and never include password digests or refresh
token digests.

DTOs:
    - UserProfile: Public view of a user
    - LoginResponse: Result of login
    - RefreshResponse: Result of refresh
"""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from src.domain.entities.user import User


@dataclass(frozen=True, kw_only=True)
class UserProfile:
    """Public view of a user (no password digest).

    Attributes:
        id: User identifier.
        email: Normalized email.
        name: Display name.
        role: Role name.
        status: Account status value.
        created_at: Registration instant.
    """

    id: UUID
    email: str
    name: str
    role: str
    status: str
    created_at: datetime

    @classmethod
    def from_user(cls, user: User) -> "UserProfile":
        """Project a User entity onto its public fields."""
        return cls(
            id=user.id,
            email=user.email,
            name=user.name,
            role=user.role,
            status=user.status.value,
            created_at=user.created_at,
        )


@dataclass(frozen=True, kw_only=True)
class LoginResponse:
    """Response from successful login.

    Attributes:
        access_token: JWT access token (short-lived).
        refresh_token: Opaque refresh secret (long-lived).
        token_type: Token type (always "bearer").
        expires_in: Access token lifetime in seconds.
        refresh_expires_in: Refresh token lifetime in seconds.
        user: Public profile of the authenticated user.
    """

    access_token: str = field(repr=False)
    refresh_token: str = field(repr=False)
    user: UserProfile
    token_type: str = "bearer"
    expires_in: int = 900
    refresh_expires_in: int = 604800


@dataclass(frozen=True, kw_only=True)
class RefreshResponse:
    """Response from successful refresh.

    ``refresh_token`` is the rotated secret; None when rotation is disabled
    and the client keeps its current secret.
    """

    access_token: str = field(repr=False)
    token_type: str = "bearer"
    expires_in: int = 900
    refresh_token: str | None = field(default=None, repr=False)
    refresh_expires_in: int | None = None
