"""Fixed-window rate limiter implementing RateLimitProtocol.

This adapter sits between the session service and a RateLimitStorage,
providing:
- A single injectable clock for all window arithmetic
- timedelta based arguments and validation
- Structured logging of refusals, lockouts and storage failures

Architecture:
    SessionService -> FixedWindowRateLimiter -> RateLimitStorage
                                                  ├── InMemoryRateLimitStorage
                                                  └── RedisRateLimitStorage -> Redis

Usage:
    from src.core.container import get_rate_limiter

    rate_limiter = get_rate_limiter()
    result = await rate_limiter.check_limit(
        "login:203.0.113.7", limit=10, window=timedelta(minutes=15)
    )
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from src.core.result import Failure, Result, Success
from src.domain.errors import RateLimitError

if TYPE_CHECKING:
    from src.domain.protocols.logger_protocol import LoggerProtocol
    from src.domain.protocols.rate_limit_protocol import RateLimitStorage


class FixedWindowRateLimiter:
    """Fixed-window rate limiter with lockout.

    Storage failures are logged and passed through as Failure; the caller
    decides the policy (the session service fails closed).

    Args:
        storage: Atomic per-key record storage.
        logger: Structured logger for observability.
        clock: Returns the current UTC instant (injectable for tests).
    """

    def __init__(
        self,
        *,
        storage: RateLimitStorage,
        logger: LoggerProtocol,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._storage = storage
        self._logger = logger
        self._clock = clock or (lambda: datetime.now(UTC))

    # -------------------------------------------------------------------------
    # RateLimitProtocol implementation
    # -------------------------------------------------------------------------
    async def check_limit(
        self, key: str, *, limit: int, window: timedelta
    ) -> Result[bool, RateLimitError]:
        """Return whether another attempt on ``key`` is allowed.

        Args:
            key: Limiter key (e.g. client IP).
            limit: Attempts allowed per window.
            window: Window length.

        Returns:
            Success(False) while blocked or once ``limit`` attempts were
            counted in the current window, Success(True) otherwise.
        """
        _require_positive(window, "window")
        if limit <= 0:
            raise ValueError("limit must be positive")

        result = await self._storage.check(
            key, now=self._clock(), limit=limit, window=window
        )
        match result:
            case Success(value=False):
                self._logger.info("rate_limit_refused", key=key, limit=limit)
            case Failure(error=error):
                self._log_failure("check_limit", key, error)
        return result

    async def increment(
        self, key: str, *, window: timedelta
    ) -> Result[int, RateLimitError]:
        """Count one failed attempt.

        Returns:
            The attempt count in the current window after this call.
        """
        _require_positive(window, "window")

        result = await self._storage.increment(key, now=self._clock(), window=window)
        match result:
            case Success(value=attempts):
                self._logger.debug("rate_limit_incremented", key=key, attempts=attempts)
            case Failure(error=error):
                self._log_failure("increment", key, error)
        return result

    async def block(
        self, key: str, *, duration: timedelta, reason: str
    ) -> Result[datetime, RateLimitError]:
        """Lock ``key`` out for ``duration`` (never shortening a longer block).

        Returns:
            The effective blocked_until instant.
        """
        _require_positive(duration, "duration")

        result = await self._storage.block(
            key, now=self._clock(), duration=duration, reason=reason
        )
        match result:
            case Success(value=blocked_until):
                self._logger.warning(
                    "rate_limit_blocked",
                    key=key,
                    reason=reason,
                    blocked_until=blocked_until.isoformat(),
                )
            case Failure(error=error):
                self._log_failure("block", key, error)
        return result

    async def is_blocked(self, key: str) -> Result[bool, RateLimitError]:
        """Pure read: whether a lockout is in force for ``key``."""
        result = await self._storage.get(key)
        match result:
            case Success(value=record):
                return Success(
                    value=record is not None and record.is_blocked(self._clock())
                )
            case Failure(error=error):
                self._log_failure("is_blocked", key, error)
                return Failure(error=error)

    async def get_attempts(self, key: str) -> Result[int, RateLimitError]:
        """Pure read of the stored count (stale until the next roll)."""
        result = await self._storage.get(key)
        match result:
            case Success(value=record):
                return Success(value=record.attempts if record else 0)
            case Failure(error=error):
                self._log_failure("get_attempts", key, error)
                return Failure(error=error)

    def _log_failure(self, operation: str, key: str, error: RateLimitError) -> None:
        self._logger.error(
            "rate_limit_storage_failed",
            error=error.cause,
            operation=operation,
            key=key,
            error_code=error.code.value,
        )


class DisabledRateLimiter:
    """RateLimitProtocol implementation that never limits.

    Wired by the container when RATE_LIMIT_ENABLED is false. Counts are
    always zero and nothing is ever blocked.
    """

    async def check_limit(
        self, key: str, *, limit: int, window: timedelta
    ) -> Result[bool, RateLimitError]:
        return Success(value=True)

    async def increment(
        self, key: str, *, window: timedelta
    ) -> Result[int, RateLimitError]:
        return Success(value=0)

    async def block(
        self, key: str, *, duration: timedelta, reason: str
    ) -> Result[datetime, RateLimitError]:
        return Success(value=datetime.now(UTC))

    async def is_blocked(self, key: str) -> Result[bool, RateLimitError]:
        return Success(value=False)

    async def get_attempts(self, key: str) -> Result[int, RateLimitError]:
        return Success(value=0)


def _require_positive(value: timedelta, name: str) -> None:
    if value <= timedelta(0):
        raise ValueError(f"{name} must be positive")
