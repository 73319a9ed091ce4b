"""In-process storage for the fixed-window rate limiter.

Records live in a dict; each key has its own asyncio.Lock so that
concurrent failures on one key serialise while different keys proceed
independently. Single-process only: use RedisRateLimitStorage when several
workers share limits.

The storage is unbounded: every key that was ever checked or incremented
keeps its record and lock for the life of the process. Nothing evicts idle
keys, so memory grows with the number of distinct keys seen. Reads of
unknown keys allocate nothing.
"""

from __future__ import annotations

import asyncio
from collections import defaultdict
from dataclasses import replace
from datetime import datetime, timedelta

from src.core.result import Result, Success
from src.domain.errors import RateLimitError
from src.domain.value_objects.rate_limit_record import RateLimitRecord


class InMemoryRateLimitStorage:
    """Dict-backed RateLimitStorage with per-key locks.

    Records are created lazily on the first check or increment and are never
    evicted; an idle key simply rolls over on its next use.
    """

    def __init__(self) -> None:
        self._records: dict[str, RateLimitRecord] = {}
        self._locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    async def check(
        self, key: str, *, now: datetime, limit: int, window: timedelta
    ) -> Result[bool, RateLimitError]:
        async with self._locks[key]:
            record = self._record(key, now)
            return Success(value=record.check(now, limit, window))

    async def increment(
        self, key: str, *, now: datetime, window: timedelta
    ) -> Result[int, RateLimitError]:
        async with self._locks[key]:
            record = self._record(key, now)
            return Success(value=record.increment(now, window))

    async def block(
        self, key: str, *, now: datetime, duration: timedelta, reason: str
    ) -> Result[datetime, RateLimitError]:
        async with self._locks[key]:
            record = self._record(key, now)
            return Success(value=record.block(now, duration, reason))

    async def get(self, key: str) -> Result[RateLimitRecord | None, RateLimitError]:
        if key not in self._records:
            return Success(value=None)
        async with self._locks[key]:
            record = self._records.get(key)
            return Success(value=replace(record) if record else None)

    def _record(self, key: str, now: datetime) -> RateLimitRecord:
        record = self._records.get(key)
        if record is None:
            record = RateLimitRecord(window_start=now)
            self._records[key] = record
        return record
