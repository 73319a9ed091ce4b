"""Domain enums for business logic.

This package contains enumerations used throughout the domain layer.

Available Enums:
    - UserStatus: Account lifecycle status (only ACTIVE may authenticate)
    - RevocationReason: Why a refresh token was revoked
"""

from src.domain.enums.revocation_reason import RevocationReason
from src.domain.enums.user_status import UserStatus

__all__ = [
    "RevocationReason",
    "UserStatus",
]
