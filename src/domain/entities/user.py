"""User domain entity for authentication.

Pure business logic, no framework dependencies. The session engine only
reads users; creation and updates belong to user management.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID

from src.domain.enums import UserStatus


@dataclass
class User:
    """User domain entity with authentication business rules.

    Business Rules:
        - Only ACTIVE users may log in, refresh or read their profile
        - Email is stored normalized (lowercase) for lookup
        - password_hash is a bcrypt digest, never plaintext

    Attributes:
        id: Unique user identifier
        email: Normalized email address
        password_hash: Bcrypt hashed password (never plaintext)
        role: Free-form role name embedded in access tokens
        status: Account lifecycle status
        name: Display name
        created_at: Timestamp when user was created
        updated_at: Timestamp when user was last updated

    Example:
        >>> user = User(
        ...     id=uuid7(),
        ...     email="user@example.com",
        ...     password_hash="$2b$12$...",
        ... )
        >>> user.is_active()
        True
    """

    id: UUID
    email: str
    password_hash: str
    role: str = "user"
    status: UserStatus = UserStatus.ACTIVE
    name: str = ""
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def is_active(self) -> bool:
        """Check if the account may authenticate.

        Returns:
            True only for ACTIVE accounts.
        """
        return self.status == UserStatus.ACTIVE

    def __repr__(self) -> str:
        """Representation without the password digest."""
        return (
            f"User(id={self.id!s}, email={self.email!r}, role={self.role!r}, "
            f"status={self.status.value!r})"
        )
