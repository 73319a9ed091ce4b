"""User database model.

Security:
    - password_hash: NEVER stores plaintext passwords (bcrypt digest)
    - email: stored lowercase, unique, indexed for login lookups
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from src.domain.enums import UserStatus
from src.infrastructure.persistence.base import BaseModel, UpdatedAtMixin


class UserModel(UpdatedAtMixin, BaseModel):
    """User model read by the session engine.

    Fields:
        id: UUID primary key (inherited)
        created_at: Timestamp when user registered (inherited)
        updated_at: Timestamp when user last updated (inherited)
        email: Unique email address (lowercase, indexed)
        password_hash: Bcrypt digest
        name: Display name
        role: Role name embedded in access tokens
        status: Lifecycle status (only "active" may authenticate)
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
        comment="User email address (lowercase)",
    )
    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Bcrypt hashed password (NEVER plaintext)",
    )
    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        default="",
        comment="Display name",
    )
    role: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        default="user",
        comment="Role name embedded in access tokens",
    )
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=UserStatus.ACTIVE.value,
        index=True,
        comment="Account status (active, inactive, suspended)",
    )

    def __repr__(self) -> str:
        """String representation without the digest."""
        return f"<UserModel(id={self.id}, email={self.email}, status={self.status})>"
