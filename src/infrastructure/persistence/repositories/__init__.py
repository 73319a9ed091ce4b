"""SQLAlchemy repository implementations.

Each repository receives a Database and runs one transaction per call.
"""

from src.infrastructure.persistence.repositories.refresh_token_repository import (
    RefreshTokenRepository,
)
from src.infrastructure.persistence.repositories.user_repository import (
    UserRepository,
)

__all__ = [
    "RefreshTokenRepository",
    "UserRepository",
]
