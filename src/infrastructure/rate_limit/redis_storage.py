"""Redis-backed storage for the fixed-window rate limiter.

Every mutating operation runs the fixed-window Lua script through EVALSHA,
so the read-modify-write of one key is atomic across all workers sharing
the Redis instance. Reads use HGETALL directly.

Fail-closed policy:
    Redis errors are returned as Failure(RateLimitError(STORAGE_UNAVAILABLE)).
    The session service refuses the login rather than letting an uncounted
    attempt through.

Note:
    This is a storage component used by FixedWindowRateLimiter. Key prefixing
    is done here so that limiter keys never collide with other Redis data.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from functools import partial
from pathlib import Path
from typing import Any

from redis.exceptions import NoScriptError, RedisError

from src.core.enums import ErrorCode
from src.core.result import Failure, Result, Success
from src.domain.errors import RateLimitError
from src.domain.value_objects.rate_limit_record import RateLimitRecord

KEY_PREFIX = "rate_limit:fixed_window:"


@dataclass(slots=True)
class _LuaRefs:
    """Holds compiled Lua script SHA references."""

    fixed_window_sha: str | None = None


class RedisRateLimitStorage:
    """Redis storage for fixed-window records with an atomic Lua script.

    Args:
        redis_client: An async Redis client (redis.asyncio.Redis compatible).

    Attributes:
        redis: The Redis client instance.
        _lua: Cached Lua script SHAs.
    """

    def __init__(self, *, redis_client: Any) -> None:
        self.redis = redis_client
        self._lua = _LuaRefs()
        self._script_lock = asyncio.Lock()

    # ---------------------------------------------------------------------
    # RateLimitStorage implementation
    # ---------------------------------------------------------------------
    async def check(
        self, key: str, *, now: datetime, limit: int, window: timedelta
    ) -> Result[bool, RateLimitError]:
        """Atomically roll the window and compare attempts with the limit."""
        result = await self._run("check", key, now, window, limit)
        match result:
            case Success(value=resp):
                return Success(value=bool(int(resp[0])))
            case Failure(error=error):
                return Failure(error=error)

    async def increment(
        self, key: str, *, now: datetime, window: timedelta
    ) -> Result[int, RateLimitError]:
        """Atomically roll the window and count one attempt."""
        result = await self._run("incr", key, now, window)
        match result:
            case Success(value=resp):
                return Success(value=int(resp[0]))
            case Failure(error=error):
                return Failure(error=error)

    async def block(
        self, key: str, *, now: datetime, duration: timedelta, reason: str
    ) -> Result[datetime, RateLimitError]:
        """Atomically extend the lockout to now + duration."""
        # The window argument is unused by the block branch
        result = await self._run(
            "block", key, now, timedelta(0), duration.total_seconds(), reason
        )
        match result:
            case Success(value=resp):
                return Success(value=_from_ts(resp[2]))
            case Failure(error=error):
                return Failure(error=error)

    async def get(self, key: str) -> Result[RateLimitRecord | None, RateLimitError]:
        """Read the record without running the script."""
        try:
            raw: dict[Any, Any] = await self.redis.hgetall(KEY_PREFIX + key)
        except (RedisError, OSError) as exc:
            return _unavailable(key, exc)

        if not raw:
            return Success(value=None)

        fields = {_text(k): _text(v) for k, v in raw.items()}
        blocked_ts = float(fields.get("blocked_until", "0") or 0)
        return Success(
            value=RateLimitRecord(
                window_start=_from_ts(fields["window_start"]),
                attempts=int(fields.get("attempts", "0")),
                blocked_until=_from_ts(blocked_ts) if blocked_ts > 0 else None,
                block_reason=fields.get("block_reason") or None,
            )
        )

    # ---------------------------------------------------------------------
    # Internal helpers
    # ---------------------------------------------------------------------
    async def _run(
        self,
        op: str,
        key: str,
        now: datetime,
        window: timedelta,
        *extra: float | int | str,
    ) -> Result[list[Any], RateLimitError]:
        args = (op, now.timestamp(), window.total_seconds(), *extra)
        try:
            sha = await self._ensure_fixed_window_script()
            try:
                resp = await self.redis.evalsha(sha, 1, KEY_PREFIX + key, *args)
            except NoScriptError:
                # Script cache flushed (restart or SCRIPT FLUSH): reload once
                self._lua.fixed_window_sha = None
                sha = await self._ensure_fixed_window_script()
                resp = await self.redis.evalsha(sha, 1, KEY_PREFIX + key, *args)
        except (RedisError, OSError) as exc:
            return _unavailable(key, exc)
        return Success(value=list(resp))

    async def _ensure_fixed_window_script(self) -> str:
        """Load the fixed-window Lua script into Redis and cache the SHA.

        Returns:
            str: Script SHA.
        """
        if self._lua.fixed_window_sha:
            return self._lua.fixed_window_sha
        async with self._script_lock:
            if self._lua.fixed_window_sha:
                return self._lua.fixed_window_sha
            script = await _read_lua_script("lua_scripts/fixed_window.lua")
            sha = _text(await self.redis.script_load(script))
            self._lua.fixed_window_sha = sha
            return sha


def _unavailable(key: str, exc: BaseException) -> Failure[RateLimitError]:
    return Failure(
        error=RateLimitError(
            code=ErrorCode.STORAGE_UNAVAILABLE,
            message="Rate limit storage unavailable",
            details={"key": key},
            cause=exc,
        )
    )


def _text(value: Any) -> str:
    return value.decode("utf-8") if isinstance(value, bytes) else str(value)


def _from_ts(value: Any) -> datetime:
    return datetime.fromtimestamp(float(_text(value)), tz=UTC)


def _read_lua_script_sync(path: Path) -> str:
    """Synchronous helper to read Lua script (called via run_in_executor)."""
    return path.read_text(encoding="utf-8")


async def _read_lua_script(rel_path: str) -> str:
    """Read Lua script file relative to this module.

    Uses run_in_executor to avoid blocking the event loop on file IO.

    Args:
        rel_path: Relative path from this module's directory.

    Returns:
        Script contents as string.
    """
    full_path = Path(__file__).parent / rel_path
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, partial(_read_lua_script_sync, full_path))
