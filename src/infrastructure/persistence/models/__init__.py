"""Database models for persistence layer.

SQLAlchemy models that map to database tables. These are infrastructure
concerns and are not imported by the domain layer.

Models Organization:
    - user.py: User model
    - refresh_token.py: Refresh token model

Note:
    Domain entities (dataclasses) live in src/domain/entities/ and are
    mapped to these models in the repositories.
"""

from src.infrastructure.persistence.models.refresh_token import RefreshTokenModel
from src.infrastructure.persistence.models.user import UserModel

__all__ = [
    "RefreshTokenModel",
    "UserModel",
]
