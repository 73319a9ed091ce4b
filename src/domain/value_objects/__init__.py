"""Domain value objects.

Usage:
    from src.domain.value_objects import Credentials, LoginRateLimitPolicy
"""

from src.domain.value_objects.credentials import Credentials
from src.domain.value_objects.rate_limit_policy import (
    ACCOUNT_LOCKOUT_REASON,
    BRUTE_FORCE_REASON,
    LoginRateLimitPolicy,
)
from src.domain.value_objects.rate_limit_record import RateLimitRecord
from src.domain.value_objects.token_claims import TokenClaims

__all__ = [
    "ACCOUNT_LOCKOUT_REASON",
    "BRUTE_FORCE_REASON",
    "Credentials",
    "LoginRateLimitPolicy",
    "RateLimitRecord",
    "TokenClaims",
]
