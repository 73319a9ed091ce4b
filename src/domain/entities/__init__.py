"""Domain entities.

Usage:
    from src.domain.entities import RefreshToken, User
"""

from src.domain.entities.refresh_token import RefreshToken
from src.domain.entities.user import User

__all__ = [
    "RefreshToken",
    "User",
]
