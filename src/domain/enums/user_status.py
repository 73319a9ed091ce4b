"""User account status.

Only ACTIVE accounts may log in, refresh or read their profile. Other
states are set by user management, which lives outside this package.
"""

from enum import Enum


class UserStatus(str, Enum):
    """Lifecycle status of a user account."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"
