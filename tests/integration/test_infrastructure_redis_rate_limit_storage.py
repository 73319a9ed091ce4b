"""Integration tests for RedisRateLimitStorage.

Runs the fixed-window Lua script against a real Redis. The script takes
``now`` as an argument, so time travel needs no clock patching; TTLs are
set relative to that ``now`` and stay meaningful on a real server.

Requires REDIS_URL (e.g. redis://localhost:6379/15); skipped otherwise.
"""

import os
from datetime import timedelta

import pytest
import pytest_asyncio
from redis.asyncio import ConnectionPool, Redis
from redis.exceptions import RedisError
from uuid_extensions import uuid7

from src.core.result import Success
from src.infrastructure.rate_limit.redis_storage import (
    KEY_PREFIX,
    RedisRateLimitStorage,
)
from tests.utils.fakes import T0

WINDOW = timedelta(seconds=60)
LIMIT = 10


@pytest_asyncio.fixture
async def redis_client():
    """Create Redis client for testing."""
    url = os.environ.get("REDIS_URL")
    if not url:
        pytest.skip("REDIS_URL not set")
    pool = ConnectionPool.from_url(
        url,
        max_connections=5,
        decode_responses=False,  # storage decodes hash fields itself
    )
    client = Redis(connection_pool=pool)
    try:
        await client.ping()
    except (RedisError, OSError) as exc:
        await client.aclose()
        await pool.disconnect()
        pytest.skip(f"Redis unreachable: {exc}")
    yield client
    await client.aclose()
    await pool.disconnect()


@pytest_asyncio.fixture
async def clean_keys(redis_client):
    """Cleanup fixed-window keys after each test."""
    yield
    keys = await redis_client.keys(KEY_PREFIX + "*")
    if keys:
        await redis_client.delete(*keys)


@pytest_asyncio.fixture
async def storage(redis_client, clean_keys):
    """Create RedisRateLimitStorage instance."""
    return RedisRateLimitStorage(redis_client=redis_client)


@pytest.fixture
def key():
    """Unique limiter key per test."""
    return f"203.0.113.7:{uuid7()}"


@pytest.mark.integration
class TestFixedWindow:
    """Window counting through the real script."""

    async def test_eleventh_attempt_refused(self, storage, key):
        for attempt in range(LIMIT):
            allowed = await storage.check(key, now=T0, limit=LIMIT, window=WINDOW)
            assert allowed == Success(value=True), f"attempt {attempt + 1}"
            await storage.increment(key, now=T0, window=WINDOW)

        result = await storage.check(key, now=T0, limit=LIMIT, window=WINDOW)

        assert result == Success(value=False)

    async def test_increment_returns_running_count(self, storage, key):
        counts = [
            await storage.increment(key, now=T0 + timedelta(seconds=i), window=WINDOW)
            for i in range(3)
        ]

        assert counts == [Success(value=1), Success(value=2), Success(value=3)]

    async def test_window_rolls_over_after_expiry(self, storage, key):
        for _ in range(LIMIT):
            await storage.increment(key, now=T0, window=WINDOW)
        later = T0 + timedelta(seconds=61)

        allowed = await storage.check(key, now=later, limit=LIMIT, window=WINDOW)
        count = await storage.increment(key, now=later, window=WINDOW)

        assert allowed == Success(value=True)
        assert count == Success(value=1)

    async def test_window_start_is_first_attempt_not_clock_boundary(
        self, storage, key
    ):
        start = T0 + timedelta(seconds=45)
        for _ in range(LIMIT):
            await storage.increment(key, now=start, window=WINDOW)

        # 30s after the first attempt: still the same window
        result = await storage.check(
            key, now=start + timedelta(seconds=30), limit=LIMIT, window=WINDOW
        )

        assert result == Success(value=False)

    async def test_record_ttl_tracks_window(self, storage, redis_client, key):
        await storage.increment(key, now=T0, window=WINDOW)

        ttl = await redis_client.ttl(KEY_PREFIX + key)

        assert 1 <= ttl <= 60

    async def test_get_reads_script_record(self, storage, key):
        await storage.increment(key, now=T0, window=WINDOW)
        await storage.increment(key, now=T0, window=WINDOW)

        match await storage.get(key):
            case Success(value=record):
                assert record.attempts == 2
                assert record.window_start == T0
                assert record.blocked_until is None
            case other:
                pytest.fail(f"unexpected result {other}")

    async def test_get_unknown_key_is_none(self, storage, key):
        assert await storage.get(key) == Success(value=None)


@pytest.mark.integration
class TestLockout:
    """Blocks applied through the real script."""

    async def test_block_outranks_window(self, storage, key):
        await storage.block(
            key, now=T0, duration=timedelta(minutes=30), reason="brute_force"
        )

        # Window long gone, block still active
        during = await storage.check(
            key, now=T0 + timedelta(seconds=61), limit=LIMIT, window=WINDOW
        )
        after = await storage.check(
            key, now=T0 + timedelta(minutes=30), limit=LIMIT, window=WINDOW
        )

        assert during == Success(value=False)
        assert after == Success(value=True)

    async def test_shorter_block_never_shortens_longer(
        self, storage, redis_client, key
    ):
        first = await storage.block(
            key, now=T0, duration=timedelta(minutes=30), reason="brute_force"
        )
        second = await storage.block(
            key, now=T0, duration=timedelta(minutes=5), reason="account_lockout"
        )

        assert first == Success(value=T0 + timedelta(minutes=30))
        assert second == Success(value=T0 + timedelta(minutes=30))
        match await storage.get(key):
            case Success(value=record):
                assert record.blocked_until == T0 + timedelta(minutes=30)
                assert record.block_reason == "brute_force"
            case other:
                pytest.fail(f"unexpected result {other}")
        assert await redis_client.ttl(KEY_PREFIX + key) > 1700

    async def test_window_increment_keeps_block_expiry(
        self, storage, redis_client, key
    ):
        await storage.block(
            key, now=T0, duration=timedelta(minutes=30), reason="brute_force"
        )

        await storage.increment(key, now=T0, window=WINDOW)

        assert await redis_client.ttl(KEY_PREFIX + key) > 1700

    async def test_longer_block_extends(self, storage, key):
        await storage.block(
            key, now=T0, duration=timedelta(minutes=5), reason="brute_force"
        )

        result = await storage.block(
            key, now=T0, duration=timedelta(minutes=30), reason="account_lockout"
        )

        assert result == Success(value=T0 + timedelta(minutes=30))


@pytest.mark.integration
class TestScriptCache:
    """EVALSHA recovery after the server drops its script cache."""

    async def test_check_reloads_flushed_script(self, storage, redis_client, key):
        await storage.increment(key, now=T0, window=WINDOW)
        await redis_client.script_flush()

        result = await storage.check(key, now=T0, limit=LIMIT, window=WINDOW)

        assert result == Success(value=True)
