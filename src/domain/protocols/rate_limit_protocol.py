"""Rate limit protocols (ports) for fixed-window login limiting.

Two ports:
- RateLimitProtocol: what the session service talks to (clock-aware,
  timedelta based, logs decisions)
- RateLimitStorage: atomic per-key record operations that an adapter backs
  with process memory or Redis

Following hexagonal architecture:
- Domain defines the PORTS (this module)
- Infrastructure provides ADAPTERS (FixedWindowRateLimiter,
  InMemoryRateLimitStorage, RedisRateLimitStorage)
- Application layer uses the protocol (doesn't know about specific adapters)

Usage:
    from src.domain.protocols import RateLimitProtocol

    match await rate_limiter.check_limit(key, limit=10, window=timedelta(minutes=15)):
        case Success(value=False):
            ...  # refuse
        case Failure(error=error):
            ...  # storage down: fail closed
"""

from datetime import datetime, timedelta
from typing import Protocol

from src.core.result import Result
from src.domain.errors import RateLimitError
from src.domain.value_objects.rate_limit_record import RateLimitRecord


class RateLimitProtocol(Protocol):
    """Fixed-window rate limiter with lockout.

    Every operation on one key is atomic with respect to every other
    operation on the same key. Operations on different keys are independent.

    Error Handling:
        Failure(STORAGE_UNAVAILABLE) means the decision could not be made.
        Callers fail closed.
    """

    async def check_limit(
        self, key: str, *, limit: int, window: timedelta
    ) -> Result[bool, RateLimitError]:
        """Return whether another attempt is allowed.

        Blocked keys get False without any state change. Otherwise an
        elapsed window is rolled over and the answer is attempts < limit.
        """
        ...

    async def increment(
        self, key: str, *, window: timedelta
    ) -> Result[int, RateLimitError]:
        """Count one failed attempt (rolling an elapsed window first).

        Returns:
            The new attempt count.
        """
        ...

    async def block(
        self, key: str, *, duration: timedelta, reason: str
    ) -> Result[datetime, RateLimitError]:
        """Lock the key out until now + duration.

        A longer lockout already in force is kept. Attempts are not cleared.

        Returns:
            The effective blocked_until instant.
        """
        ...

    async def is_blocked(self, key: str) -> Result[bool, RateLimitError]:
        """Pure read: whether a lockout is in force."""
        ...

    async def get_attempts(self, key: str) -> Result[int, RateLimitError]:
        """Pure read of the stored attempt count.

        Rollover is lazy, so a count from an elapsed window persists until
        the next check_limit or increment.
        """
        ...


class RateLimitStorage(Protocol):
    """Atomic per-key storage for RateLimitRecord.

    The limiter passes ``now`` explicitly so that all window arithmetic uses
    one clock. Every mutating method is a single read-modify-write that no
    concurrent caller on the same key can interleave with.
    """

    async def check(
        self, key: str, *, now: datetime, limit: int, window: timedelta
    ) -> Result[bool, RateLimitError]:
        """RateLimitRecord.check under the key's lock."""
        ...

    async def increment(
        self, key: str, *, now: datetime, window: timedelta
    ) -> Result[int, RateLimitError]:
        """RateLimitRecord.increment under the key's lock."""
        ...

    async def block(
        self, key: str, *, now: datetime, duration: timedelta, reason: str
    ) -> Result[datetime, RateLimitError]:
        """RateLimitRecord.block under the key's lock."""
        ...

    async def get(self, key: str) -> Result[RateLimitRecord | None, RateLimitError]:
        """Snapshot of the record, None if the key was never seen."""
        ...
