"""In-memory persistence adapters.

Dict-backed implementations of the repository protocols. Used when no
DATABASE_URL is configured (development, single-process deployments) and
throughout the test suite. State is lost on restart.
"""

from src.infrastructure.persistence.memory.refresh_token_repository import (
    InMemoryRefreshTokenRepository,
)
from src.infrastructure.persistence.memory.user_repository import (
    InMemoryUserRepository,
)

__all__ = [
    "InMemoryRefreshTokenRepository",
    "InMemoryUserRepository",
]
