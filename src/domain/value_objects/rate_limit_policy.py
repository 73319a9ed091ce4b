"""Login rate limit policy value object.

Immutable configuration for the login limiter: how many failed attempts a
key may make per fixed window, and when and for how long repeated failures
lock the key out. A second, account-scoped counter catches wrong passwords
for one account spread across many keys.

Usage:
    from datetime import timedelta
    from src.domain.value_objects import LoginRateLimitPolicy

    policy = LoginRateLimitPolicy(
        limit=10,
        window=timedelta(minutes=15),
        block_threshold=10,
        block_duration=timedelta(minutes=30),
    )
    policy.account_key(user.id)  # "account:0190..."
"""

from dataclasses import dataclass
from datetime import timedelta
from uuid import UUID

BRUTE_FORCE_REASON = "brute_force"
ACCOUNT_LOCKOUT_REASON = "account_lockout"
ACCOUNT_KEY_PREFIX = "account:"


@dataclass(frozen=True, slots=True, kw_only=True)
class LoginRateLimitPolicy:
    """Login rate limit configuration (value object).

    Fixed Window Algorithm:
        - Each key gets ``limit`` failed attempts per ``window``
        - The window starts at the first counted attempt and resets lazily
        - Reaching ``block_threshold`` failures applies a lockout of
          ``block_duration`` which outranks the window counter

    Account lockout:
        - Wrong passwords also count against ``account_key(user_id)`` in
          windows of ``account_window``, whatever key the caller supplied
        - Reaching ``account_block_threshold`` locks the account for
          ``block_duration``

    Attributes:
        limit: Failed attempts allowed per window before refusal.
        window: Length of the fixed window.
        block_threshold: Failed attempts that trigger a lockout.
        block_duration: How long a lockout lasts.
        account_block_threshold: Wrong passwords that lock one account.
        account_window: Window for the per-account count.

    Raises:
        ValueError: If any count or duration is not positive.
    """

    limit: int
    window: timedelta
    block_threshold: int
    block_duration: timedelta
    account_block_threshold: int = 10
    account_window: timedelta = timedelta(hours=1)

    def __post_init__(self) -> None:
        """Validate policy values."""
        if self.limit <= 0:
            raise ValueError("limit must be positive")
        if self.block_threshold <= 0:
            raise ValueError("block_threshold must be positive")
        if self.account_block_threshold <= 0:
            raise ValueError("account_block_threshold must be positive")
        if self.window <= timedelta(0):
            raise ValueError("window must be positive")
        if self.block_duration <= timedelta(0):
            raise ValueError("block_duration must be positive")
        if self.account_window <= timedelta(0):
            raise ValueError("account_window must be positive")

    @staticmethod
    def account_key(user_id: UUID) -> str:
        """Limiter key counting wrong passwords for one account."""
        return f"{ACCOUNT_KEY_PREFIX}{user_id}"
