"""Repository dependency factories.

Application-scoped repository singletons. SQLAlchemy repositories open one
short transaction per call, so a single instance serves every request.
Without DATABASE_URL the in-memory repositories are used.
"""

from functools import lru_cache
from typing import TYPE_CHECKING

from src.core.config import get_settings
from src.core.container.infrastructure import get_database

if TYPE_CHECKING:
    from src.domain.protocols import RefreshTokenRepository, UserRepository


@lru_cache()
def get_user_repository() -> "UserRepository":
    """Get user repository (app-scoped).

    Usage:
        user_repo = get_user_repository()
        result = await user_repo.find_by_email("user@example.com")
    """
    if get_settings().database_url:
        from src.infrastructure.persistence.repositories import (
            UserRepository as SQLUserRepository,
        )

        return SQLUserRepository(database=get_database())

    from src.infrastructure.persistence.memory import InMemoryUserRepository

    return InMemoryUserRepository()


@lru_cache()
def get_refresh_token_repository() -> "RefreshTokenRepository":
    """Get refresh token repository (app-scoped)."""
    if get_settings().database_url:
        from src.infrastructure.persistence.repositories import (
            RefreshTokenRepository as SQLRefreshTokenRepository,
        )

        return SQLRefreshTokenRepository(database=get_database())

    from src.infrastructure.persistence.memory import InMemoryRefreshTokenRepository

    return InMemoryRefreshTokenRepository()
