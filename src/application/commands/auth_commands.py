"""Session commands (CQRS write operations).

Commands represent user intent to change session state.
All commands are immutable (frozen=True) and use keyword-only arguments (kw_only=True).

Pattern:
- Commands are data containers (no logic)
- SessionService executes them and returns Result types
- Plaintext secrets (password, refresh token) are excluded from repr
"""

from dataclasses import dataclass, field
from uuid import UUID


@dataclass(frozen=True, kw_only=True)
class LoginUser:
    """Log in with email and password.

    Attributes:
        email: Email as typed by the user (normalized during login).
        password: Plaintext password (never persisted or logged).
        rate_limit_key: Client identifier the limiter counts against
            (typically the client IP).
        remember_me: Issue a long-lived refresh token.

    Example:
        >>> command = LoginUser(
        ...     email="user@example.com",
        ...     password="SecurePass123!",
        ...     rate_limit_key="203.0.113.7",
        ... )
        >>> result = await session_service.login(command)
    """

    email: str
    password: str = field(repr=False)
    rate_limit_key: str
    remember_me: bool = False


@dataclass(frozen=True, kw_only=True)
class RefreshAccessToken:
    """Exchange a refresh secret for a new access token.

    Attributes:
        refresh_token: Opaque refresh secret issued at login or rotation.
    """

    refresh_token: str = field(repr=False)


@dataclass(frozen=True, kw_only=True)
class LogoutUser:
    """End one session or every session of a user.

    Exactly one target is used: ``refresh_token`` when present, otherwise
    ``user_id``.

    Attributes:
        refresh_token: Secret of the session to end.
        user_id: User whose sessions all end.
    """

    refresh_token: str | None = field(default=None, repr=False)
    user_id: UUID | None = None
