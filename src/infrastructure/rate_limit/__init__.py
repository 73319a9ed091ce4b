"""Rate limit infrastructure adapters.

This package provides infrastructure implementations for rate limiting,
following the hexagonal architecture pattern where infrastructure implements
domain ports.

Exports:
    FixedWindowRateLimiter: Fixed-window limiter implementing RateLimitProtocol.
    DisabledRateLimiter: Always-allow limiter for RATE_LIMIT_ENABLED=false.
    InMemoryRateLimitStorage: Per-key locked dict storage (single process).
    RedisRateLimitStorage: Redis storage with an atomic Lua script.
"""

from src.infrastructure.rate_limit.fixed_window_limiter import (
    DisabledRateLimiter,
    FixedWindowRateLimiter,
)
from src.infrastructure.rate_limit.memory_storage import InMemoryRateLimitStorage
from src.infrastructure.rate_limit.redis_storage import RedisRateLimitStorage

__all__ = [
    "DisabledRateLimiter",
    "FixedWindowRateLimiter",
    "InMemoryRateLimitStorage",
    "RedisRateLimitStorage",
]
