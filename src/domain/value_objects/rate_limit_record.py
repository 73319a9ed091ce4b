"""Per-key rate-limit state for the fixed-window limiter.

One record exists per limiter key (client identifier). It is mutated only
while the storage holds the key's lock, so every method here assumes
exclusive access.

State machine:
    Open -> Tracking (first counted attempt)
    Tracking -> Blocked (block applied)
    Blocked -> Open (blocked_until elapses or the window rolls over)

Window arithmetic:
    A window covers [window_start, window_start + window). The first check
    or increment at or after the window end starts a fresh window at that
    instant with attempts = 0 (lazy rollover).
"""

from dataclasses import dataclass
from datetime import datetime, timedelta


@dataclass(slots=True, kw_only=True)
class RateLimitRecord:
    """Attempt counter and lockout state for one key.

    Attributes:
        window_start: Start of the current window.
        attempts: Failed attempts counted in the current window.
        blocked_until: End of the active lockout, if any.
        block_reason: Why the lockout was applied (e.g. "brute_force").
    """

    window_start: datetime
    attempts: int = 0
    blocked_until: datetime | None = None
    block_reason: str | None = None

    def is_blocked(self, now: datetime) -> bool:
        """Pure read: True while a lockout is in force."""
        return self.blocked_until is not None and now < self.blocked_until

    def roll(self, now: datetime, window: timedelta) -> bool:
        """Start a fresh window if the current one has elapsed.

        Also clears a lockout whose instant has passed.

        Returns:
            True if the window rolled over.
        """
        if self.blocked_until is not None and now >= self.blocked_until:
            self.blocked_until = None
            self.block_reason = None
        if now - self.window_start >= window:
            self.window_start = now
            self.attempts = 0
            return True
        return False

    def check(self, now: datetime, limit: int, window: timedelta) -> bool:
        """Decide whether another attempt may proceed.

        A blocked key is refused without touching any field.
        """
        if self.is_blocked(now):
            return False
        self.roll(now, window)
        return self.attempts < limit

    def increment(self, now: datetime, window: timedelta) -> int:
        """Count one failed attempt and return the new total."""
        self.roll(now, window)
        self.attempts += 1
        return self.attempts

    def block(self, now: datetime, duration: timedelta, reason: str) -> datetime:
        """Apply a lockout ending at ``now + duration``.

        A longer lockout already in force is kept. Attempts are not cleared.

        Returns:
            The effective blocked_until.
        """
        until = now + duration
        if self.blocked_until is None or self.blocked_until < until:
            self.blocked_until = until
            self.block_reason = reason
        return self.blocked_until
