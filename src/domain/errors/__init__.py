"""Domain errors package.

Exports all domain-level error classes for convenient importing.

Usage:
    from src.domain.errors import RateLimitError, SessionError, TokenError
"""

from src.domain.errors.password_hashing_error import PasswordHashingError
from src.domain.errors.rate_limit_error import RateLimitError
from src.domain.errors.refresh_token_error import RefreshTokenStoreError
from src.domain.errors.session_error import SessionError
from src.domain.errors.token_error import TokenError
from src.domain.errors.user_lookup_error import UserLookupError

__all__ = [
    "PasswordHashingError",
    "RateLimitError",
    "RefreshTokenStoreError",
    "SessionError",
    "TokenError",
    "UserLookupError",
]
