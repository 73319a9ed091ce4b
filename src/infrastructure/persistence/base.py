"""Declarative base for the session store tables.

Two tables live here: ``users`` (read by login, refresh and me) and
``refresh_tokens`` (written on login and rotation, updated on revocation).
Domain entities never inherit from these classes; repositories map rows
to entities.

    BaseModel (id, created_at)
        ├── UserModel (+ updated_at via UpdatedAtMixin)
        └── RefreshTokenModel

The generic ``Uuid`` column type keeps the schema usable on PostgreSQL and
SQLite alike.
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import DateTime, Uuid, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from uuid_extensions import uuid7


class BaseModel(DeclarativeBase):
    """Common columns: time-ordered UUID key and creation instant."""

    __abstract__ = True

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid7)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        return f"<{type(self).__name__}(id={self.id})>"


class UpdatedAtMixin:
    """Adds ``updated_at``, maintained by the database on UPDATE."""

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
