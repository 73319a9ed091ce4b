"""Unit tests for SessionService.

Tests cover:
- Login success (claims decode to the user) and failure paths
- Anti-enumeration: unknown email, inactive account and wrong password
  return the identical error and each count exactly one attempt
- Rate limiting: limit=10/window=60s scenario, lockout until blocked_until,
  window rollover, format errors not counted
- Refresh: round trip, expiry, rotation, reuse detection, concurrent refresh
- Logout (single, all, unknown) and Me
- Fail-closed limiter, internal faults, request timeout

Architecture:
- Real in-memory adapters, bcrypt (cost 4), JWT and HMAC services
- Injected FakeClock drives the limiter and refresh token expiry
- Mocked ports only where a failure must be forced
"""

import asyncio
from dataclasses import dataclass, replace
from datetime import timedelta
from unittest.mock import AsyncMock, Mock

import pytest
from uuid_extensions import uuid7

from src.application.commands import LoginUser, LogoutUser, RefreshAccessToken
from src.application.dtos import LoginResponse, RequestContext, UserProfile
from src.application.queries import GetCurrentUser
from src.application.services import SessionService
from src.core.enums import ErrorCode
from src.core.result import Failure, Success
from src.domain.entities import RefreshToken, User
from src.domain.enums import RevocationReason, UserStatus
from src.domain.errors import RateLimitError, RefreshTokenStoreError, TokenError
from src.domain.errors.session_error import (
    INVALID_CREDENTIALS,
    INVALID_REFRESH_TOKEN,
    RATE_LIMITED,
    USER_NOT_FOUND,
)
from src.domain.value_objects import LoginRateLimitPolicy
from src.infrastructure.persistence.memory import (
    InMemoryRefreshTokenRepository,
    InMemoryUserRepository,
)
from src.infrastructure.rate_limit import (
    FixedWindowRateLimiter,
    InMemoryRateLimitStorage,
)
from src.infrastructure.security import JWTService, RefreshTokenService
from tests.utils.fakes import (
    FAST_PASSWORD_SERVICE,
    PASSWORD,
    T0,
    FakeClock,
    logged_events,
    make_logger,
    make_user,
)

KEY = "203.0.113.7"
SECRET_KEY = "session-test-secret-key-at-least-32-bytes"


@dataclass
class Harness:
    service: SessionService
    users: InMemoryUserRepository
    tokens: InMemoryRefreshTokenRepository
    limiter: FixedWindowRateLimiter
    token_service: JWTService
    refresh_token_service: RefreshTokenService
    password_service: Mock
    clock: FakeClock
    logger: Mock
    user: User


def build_harness(
    *,
    limit: int = 10,
    window: timedelta = timedelta(seconds=60),
    block_threshold: int = 10,
    block_duration: timedelta = timedelta(minutes=30),
    account_block_threshold: int = 10,
    account_window: timedelta = timedelta(hours=1),
    rotate: bool = True,
    **overrides,
) -> Harness:
    clock = FakeClock()
    logger = make_logger()
    user = make_user()
    users = InMemoryUserRepository([user])
    tokens = InMemoryRefreshTokenRepository(clock=clock)
    limiter = FixedWindowRateLimiter(
        storage=InMemoryRateLimitStorage(), logger=logger, clock=clock
    )
    token_service = JWTService(secret_key=SECRET_KEY)
    refresh_token_service = RefreshTokenService(salt="session-test-salt-123")
    password_service = Mock(wraps=FAST_PASSWORD_SERVICE)
    dependencies = {
        "user_repo": users,
        "refresh_token_repo": tokens,
        "password_service": password_service,
        "token_service": token_service,
        "refresh_token_service": refresh_token_service,
        "rate_limiter": limiter,
        "policy": LoginRateLimitPolicy(
            limit=limit,
            window=window,
            block_threshold=block_threshold,
            block_duration=block_duration,
            account_block_threshold=account_block_threshold,
            account_window=account_window,
        ),
        "logger": logger,
    } | overrides
    service = SessionService(
        **dependencies, rotate_refresh_tokens=rotate, clock=clock
    )
    return Harness(
        service=service,
        users=users,
        tokens=tokens,
        limiter=limiter,
        token_service=token_service,
        refresh_token_service=refresh_token_service,
        password_service=password_service,
        clock=clock,
        logger=logger,
        user=user,
    )


def login_command(
    email: str = "alice@example.com",
    password: str = PASSWORD,
    remember_me: bool = False,
    key: str = KEY,
) -> LoginUser:
    return LoginUser(
        email=email, password=password, rate_limit_key=key, remember_me=remember_me
    )


async def login_ok(h: Harness, **kwargs) -> LoginResponse:
    result = await h.service.login(login_command(**kwargs))
    assert isinstance(result, Success), result
    return result.value


async def attempts(h: Harness, key: str = KEY) -> int:
    return (await h.limiter.get_attempts(key)).value


@pytest.fixture
def h() -> Harness:
    return build_harness()


# =============================================================================
# Login
# =============================================================================


@pytest.mark.unit
class TestLoginSuccess:
    """Test successful login."""

    async def test_access_token_claims_decode_to_user(self, h):
        response = await login_ok(h)

        claims = h.service.verify_access_token(response.access_token).value
        assert claims.user_id == h.user.id
        assert claims.email == h.user.email
        assert claims.role == h.user.role

    async def test_response_shape(self, h):
        response = await login_ok(h)

        assert response.token_type == "bearer"
        assert response.expires_in == 15 * 60
        assert response.refresh_expires_in == int(timedelta(days=7).total_seconds())
        assert response.user == UserProfile.from_user(h.user)
        assert "password_hash" not in vars(response.user)

    async def test_email_is_normalized(self, h):
        await login_ok(h, email="  ALICE@Example.com ")

    async def test_remember_me_gets_configured_lifetime(self, h):
        response = await login_ok(h, remember_me=True)

        assert response.refresh_expires_in == int(timedelta(days=30).total_seconds())

    async def test_refresh_record_stores_digest_only(self, h):
        response = await login_ok(h)

        token_hash = h.refresh_token_service.hash_token(response.refresh_token)
        record = (await h.tokens.find_by_hash(token_hash)).value
        assert record.user_id == h.user.id
        assert record.created_at == T0
        assert record.expires_at == T0 + timedelta(days=7)
        assert record.token_hash != response.refresh_token

    async def test_success_does_not_touch_limiter(self, h):
        await h.service.login(login_command(password="WrongPass999"))

        await login_ok(h)

        assert await attempts(h) == 1

    async def test_success_is_logged_without_secrets(self, h):
        response = await login_ok(h)

        assert "login_succeeded" in logged_events(h.logger, "info")
        logged = repr(h.logger.mock_calls)
        assert PASSWORD not in logged
        assert response.refresh_token not in logged
        assert response.access_token not in logged


@pytest.mark.unit
class TestLoginAntiEnumeration:
    """Unknown email, inactive account and wrong password are indistinguishable."""

    async def test_wrong_password(self, h):
        result = await h.service.login(login_command(password="WrongPass999"))

        assert result == Failure(error=INVALID_CREDENTIALS)
        assert await attempts(h) == 1

    async def test_unknown_email_gives_identical_error(self, h):
        wrong = await h.service.login(login_command(password="WrongPass999"))
        unknown = await h.service.login(login_command(email="ghost@example.com"))

        assert unknown == wrong
        assert unknown.error is wrong.error
        assert await attempts(h) == 2

    async def test_inactive_account_gives_identical_error(self, h):
        h.users.add(replace(h.user, status=UserStatus.SUSPENDED))

        result = await h.service.login(login_command())

        assert result == Failure(error=INVALID_CREDENTIALS)
        assert await attempts(h) == 1

    async def test_unknown_email_still_runs_a_password_check(self, h):
        """Timing equalisation: a bcrypt verify happens without a user."""
        await h.service.login(login_command(email="ghost@example.com"))

        assert h.password_service.verify_password.call_count == 1

    async def test_reasons_are_logged_not_returned(self, h):
        await h.service.login(login_command(password="WrongPass999"))
        await h.service.login(login_command(email="ghost@example.com"))

        reasons = [
            c.kwargs["reason"]
            for c in h.logger.info.call_args_list
            if c.args[0] == "login_failed"
        ]
        assert reasons == ["wrong_password", "unknown_email"]


@pytest.mark.unit
class TestLoginFormat:
    """Malformed credentials are rejected before any lookup."""

    @pytest.mark.parametrize(
        ("email", "password"),
        [("not-an-email", PASSWORD), ("alice@example.com", "short")],
    )
    async def test_invalid_format_is_not_counted(self, h, email, password):
        result = await h.service.login(login_command(email=email, password=password))

        assert isinstance(result, Failure)
        assert result.error.code is ErrorCode.INVALID_CREDENTIALS_FORMAT
        assert await attempts(h) == 0
        h.password_service.verify_password.assert_not_called()


@pytest.mark.unit
class TestLoginRateLimiting:
    """Rate limiting and lockout through login."""

    async def test_eleventh_wrong_password_is_rate_limited(self, h):
        """limit=10, window=60s: attempts 1-10 INVALID_CREDENTIALS, 11 RATE_LIMITED."""
        results = []
        for _ in range(11):
            results.append(
                await h.service.login(login_command(password="WrongPass999"))
            )
            h.clock.advance(seconds=1)

        assert results[:10] == [Failure(error=INVALID_CREDENTIALS)] * 10
        assert results[10] == Failure(error=RATE_LIMITED)

    async def test_correct_password_refused_while_blocked(self):
        h = build_harness(block_threshold=3, block_duration=timedelta(minutes=30))
        for _ in range(3):
            await h.service.login(login_command(password="WrongPass999"))

        h.clock.advance(minutes=29)
        assert await h.service.login(login_command()) == Failure(error=RATE_LIMITED)

        h.clock.advance(minutes=1)
        assert isinstance(await h.service.login(login_command()), Success)

    async def test_lockout_logged_with_reason(self):
        h = build_harness(block_threshold=2)
        for _ in range(2):
            await h.service.login(login_command(password="WrongPass999"))

        record = (await h.limiter._storage.get(KEY)).value
        assert record.block_reason == "brute_force"
        assert "rate_limit_blocked" in logged_events(h.logger, "warning")

    async def test_blocked_key_never_reaches_user_store(self):
        users = AsyncMock()
        h = build_harness(user_repo=users)
        await h.limiter.block(KEY, duration=timedelta(minutes=5), reason="manual")

        result = await h.service.login(login_command())

        assert result == Failure(error=RATE_LIMITED)
        users.find_by_email.assert_not_awaited()

    async def test_window_rollover_resets_count(self):
        h = build_harness(block_threshold=100)
        for _ in range(5):
            await h.service.login(login_command(password="WrongPass999"))

        h.clock.advance(seconds=61)
        await h.service.login(login_command(password="WrongPass999"))

        assert await attempts(h) == 1


@pytest.mark.unit
class TestAccountLockout:
    """Wrong passwords for one account are counted across all keys."""

    async def spread_wrong_passwords(self, h: Harness, count: int) -> None:
        for n in range(count):
            await h.service.login(
                login_command(password="WrongPass999", key=f"198.51.100.{n}")
            )

    async def test_wrong_passwords_from_many_keys_lock_account(self):
        h = build_harness(account_block_threshold=3)
        await self.spread_wrong_passwords(h, 3)

        result = await h.service.login(login_command(key="192.0.2.99"))

        assert result == Failure(error=INVALID_CREDENTIALS)
        assert await attempts(h, "192.0.2.99") == 1
        assert "login_account_locked" in logged_events(h.logger, "warning")
        record = (
            await h.limiter._storage.get(LoginRateLimitPolicy.account_key(h.user.id))
        ).value
        assert record.block_reason == "account_lockout"

    async def test_locked_account_answers_like_unknown_email(self):
        h = build_harness(account_block_threshold=3)
        await self.spread_wrong_passwords(h, 3)

        locked = await h.service.login(login_command(key="192.0.2.1"))
        unknown = await h.service.login(
            login_command(email="ghost@example.com", key="192.0.2.2")
        )

        assert locked == unknown
        assert h.password_service.verify_password.call_count == 3 + 2

    async def test_account_lock_expires(self):
        h = build_harness(
            account_block_threshold=3, block_duration=timedelta(minutes=30)
        )
        await self.spread_wrong_passwords(h, 3)

        h.clock.advance(minutes=30)

        assert isinstance(
            await h.service.login(login_command(key="192.0.2.1")), Success
        )

    async def test_account_window_rolls_over(self):
        h = build_harness(
            account_block_threshold=3, account_window=timedelta(hours=1)
        )
        await self.spread_wrong_passwords(h, 2)

        h.clock.advance(minutes=61)
        await self.spread_wrong_passwords(h, 2)

        assert isinstance(
            await h.service.login(login_command(key="192.0.2.1")), Success
        )

    async def test_only_wrong_passwords_count_against_account(self, h):
        h.users.add(replace(h.user, status=UserStatus.INACTIVE))
        await h.service.login(login_command())
        await h.service.login(login_command(email="ghost@example.com"))

        account_key = LoginRateLimitPolicy.account_key(h.user.id)
        assert await attempts(h, account_key) == 0
        assert await attempts(h) == 2

    async def test_account_check_failure_fails_closed(self):
        limiter = AsyncMock()
        limiter.is_blocked.side_effect = [
            Success(value=False),
            Failure(
                error=RateLimitError(
                    code=ErrorCode.STORAGE_UNAVAILABLE,
                    message="Rate limit storage unavailable",
                )
            ),
        ]
        limiter.check_limit.return_value = Success(value=True)
        h = build_harness(rate_limiter=limiter)

        result = await h.service.login(login_command())

        assert result.error.code is ErrorCode.STORAGE_UNAVAILABLE
        h.password_service.verify_password.assert_not_called()


@pytest.mark.unit
class TestLoginFailClosed:
    """Limiter storage failures refuse the login."""

    def failing_limiter(self, **methods) -> AsyncMock:
        error = RateLimitError(
            code=ErrorCode.STORAGE_UNAVAILABLE,
            message="Rate limit storage unavailable",
            cause=ConnectionError("redis down"),
        )
        limiter = AsyncMock()
        limiter.is_blocked.return_value = Success(value=False)
        limiter.check_limit.return_value = Success(value=True)
        limiter.increment.return_value = Success(value=1)
        for name in methods:
            getattr(limiter, name).return_value = Failure(error=error)
        return limiter

    @pytest.mark.parametrize("method", ["is_blocked", "check_limit"])
    async def test_read_failure_refuses_before_lookup(self, method):
        users = AsyncMock()
        h = build_harness(
            rate_limiter=self.failing_limiter(**{method: True}), user_repo=users
        )

        result = await h.service.login(login_command())

        assert isinstance(result, Failure)
        assert result.error.code is ErrorCode.STORAGE_UNAVAILABLE
        assert result.error.is_internal
        users.find_by_email.assert_not_awaited()

    async def test_increment_failure_refuses(self):
        h = build_harness(rate_limiter=self.failing_limiter(increment=True))

        result = await h.service.login(login_command(password="WrongPass999"))

        assert result.error.code is ErrorCode.STORAGE_UNAVAILABLE
        assert "rate_limiter_unavailable" in logged_events(h.logger, "error")


@pytest.mark.unit
class TestLoginInternalFaults:
    """Infrastructure faults are opaque to the caller."""

    async def test_user_store_failure(self):
        users = AsyncMock()
        users.find_by_email.return_value = Failure(
            error=Mock(code=ErrorCode.STORAGE_UNAVAILABLE, cause=OSError("db"))
        )
        h = build_harness(user_repo=users)

        result = await h.service.login(login_command())

        assert result.error.code is ErrorCode.STORAGE_UNAVAILABLE
        assert "db" not in result.error.message

    async def test_malformed_stored_digest(self, h):
        h.users.add(replace(h.user, password_hash="not-bcrypt"))

        result = await h.service.login(login_command())

        assert result.error.code is ErrorCode.HASHING_FAILED
        assert await attempts(h) == 0

    async def test_signing_failure(self):
        token_service = Mock(wraps=JWTService(secret_key=SECRET_KEY))
        token_service.issue_access_token.return_value = Failure(
            error=TokenError(code=ErrorCode.SIGNING_FAILED, message="boom")
        )
        h = build_harness(token_service=token_service)

        result = await h.service.login(login_command())

        assert result.error.code is ErrorCode.SIGNING_FAILED
        assert result.error.is_internal

    async def test_refresh_record_create_failure(self):
        tokens = AsyncMock()
        tokens.create.return_value = Failure(
            error=Mock(code=ErrorCode.REFRESH_TOKEN_ALREADY_EXISTS, cause=None)
        )
        h = build_harness(refresh_token_repo=tokens)

        result = await h.service.login(login_command())

        assert result.error.code is ErrorCode.STORAGE_UNAVAILABLE

    async def test_timeout(self):
        async def slow_lookup(email):
            await asyncio.sleep(1)

        users = AsyncMock()
        users.find_by_email.side_effect = slow_lookup
        h = build_harness(user_repo=users)

        result = await h.service.login(
            login_command(), RequestContext(timeout_seconds=0.01)
        )

        assert result.error.code is ErrorCode.REQUEST_TIMEOUT
        assert "operation_timed_out" in logged_events(h.logger, "error")

    async def test_trace_id_is_bound(self, h):
        await h.service.login(login_command(), RequestContext(trace_id="trace-42"))

        h.logger.bind.assert_called_with(operation="login", trace_id="trace-42")


# =============================================================================
# Refresh
# =============================================================================


@pytest.mark.unit
class TestRefresh:
    """Test refresh, rotation and reuse detection."""

    async def test_refresh_issues_new_access_and_rotates(self, h):
        login = await login_ok(h)

        result = await h.service.refresh(
            RefreshAccessToken(refresh_token=login.refresh_token)
        )

        assert isinstance(result, Success)
        response = result.value
        claims = h.service.verify_access_token(response.access_token).value
        assert claims.user_id == h.user.id
        assert response.refresh_token is not None
        assert response.refresh_token != login.refresh_token
        assert response.refresh_expires_in == login.refresh_expires_in

        old = await h.tokens.find_by_hash(
            h.refresh_token_service.hash_token(login.refresh_token)
        )
        assert old.value.revoked_reason is RevocationReason.ROTATED

    async def test_rotated_token_keeps_session_length(self, h):
        login = await login_ok(h, remember_me=True)
        h.clock.advance(days=1)

        response = (
            await h.service.refresh(RefreshAccessToken(refresh_token=login.refresh_token))
        ).value

        record = (
            await h.tokens.find_by_hash(
                h.refresh_token_service.hash_token(response.refresh_token)
            )
        ).value
        assert record.created_at == T0 + timedelta(days=1)
        assert record.lifetime == timedelta(days=30)

    async def test_unknown_secret(self, h):
        result = await h.service.refresh(RefreshAccessToken(refresh_token="forged"))

        assert result == Failure(error=INVALID_REFRESH_TOKEN)

    async def test_expired_token_without_revocation(self, h):
        """expires_at = now+1h queried at now+2h -> INVALID_REFRESH_TOKEN."""
        secret = "hand-made-secret"
        await h.tokens.create(
            RefreshToken(
                id=uuid7(),
                user_id=h.user.id,
                token_hash=h.refresh_token_service.hash_token(secret),
                expires_at=T0 + timedelta(hours=1),
                created_at=T0,
            )
        )
        h.clock.advance(hours=2)

        result = await h.service.refresh(RefreshAccessToken(refresh_token=secret))

        assert result == Failure(error=INVALID_REFRESH_TOKEN)

    async def test_reuse_of_rotated_token_revokes_all_sessions(self, h):
        login = await login_ok(h)
        rotated = (
            await h.service.refresh(RefreshAccessToken(refresh_token=login.refresh_token))
        ).value

        replay = await h.service.refresh(
            RefreshAccessToken(refresh_token=login.refresh_token)
        )
        after = await h.service.refresh(
            RefreshAccessToken(refresh_token=rotated.refresh_token)
        )

        assert replay == Failure(error=INVALID_REFRESH_TOKEN)
        assert after == Failure(error=INVALID_REFRESH_TOKEN)
        assert "refresh_token_reuse_detected" in logged_events(h.logger, "warning")
        current = await h.tokens.find_by_hash(
            h.refresh_token_service.hash_token(rotated.refresh_token)
        )
        assert current.value.revoked_reason is RevocationReason.REUSE_DETECTED

    async def test_concurrent_refresh_has_one_winner(self, h):
        login = await login_ok(h)
        command = RefreshAccessToken(refresh_token=login.refresh_token)

        results = await asyncio.gather(*(h.service.refresh(command) for _ in range(5)))

        winners = [r for r in results if isinstance(r, Success)]
        assert len(winners) == 1
        assert all(
            r == Failure(error=INVALID_REFRESH_TOKEN)
            for r in results
            if isinstance(r, Failure)
        )

    async def test_role_change_takes_effect_on_refresh(self, h):
        login = await login_ok(h)
        h.users.add(replace(h.user, role="admin"))

        response = (
            await h.service.refresh(RefreshAccessToken(refresh_token=login.refresh_token))
        ).value

        assert h.service.verify_access_token(response.access_token).value.role == "admin"

    async def test_inactive_owner_cannot_refresh(self, h):
        login = await login_ok(h)
        h.users.add(replace(h.user, status=UserStatus.INACTIVE))

        result = await h.service.refresh(
            RefreshAccessToken(refresh_token=login.refresh_token)
        )

        assert result == Failure(error=INVALID_REFRESH_TOKEN)

    async def test_rotation_disabled_returns_access_token_only(self):
        h = build_harness(rotate=False)
        login = await login_ok(h)
        command = RefreshAccessToken(refresh_token=login.refresh_token)

        first = (await h.service.refresh(command)).value
        second = await h.service.refresh(command)

        assert first.refresh_token is None
        assert first.refresh_expires_in is None
        assert isinstance(second, Success)

    async def test_failed_successor_write_keeps_secret_usable(self, h, monkeypatch):
        """A storage fault during rotation must not look like reuse on retry."""
        phone = await login_ok(h)
        laptop = await login_ok(h)
        real_create = h.tokens.create
        faults = [
            Failure(
                error=RefreshTokenStoreError(
                    code=ErrorCode.STORAGE_UNAVAILABLE,
                    message="Refresh token storage unavailable",
                )
            )
        ]

        async def create_failing_once(token):
            if faults:
                return faults.pop()
            return await real_create(token)

        monkeypatch.setattr(h.tokens, "create", create_failing_once)
        command = RefreshAccessToken(refresh_token=phone.refresh_token)

        failed = await h.service.refresh(command)
        retried = await h.service.refresh(command)
        other_device = await h.service.refresh(
            RefreshAccessToken(refresh_token=laptop.refresh_token)
        )

        assert failed.error.code is ErrorCode.STORAGE_UNAVAILABLE
        assert isinstance(retried, Success)
        assert isinstance(other_device, Success)
        assert "refresh_token_reuse_detected" not in logged_events(h.logger, "warning")

    async def test_lost_claim_discards_successor(self, h, monkeypatch):
        login = await login_ok(h)
        old_hash = h.refresh_token_service.hash_token(login.refresh_token)
        real_revoke = h.tokens.revoke

        async def revoke_claimed_elsewhere(token_hash, *, reason):
            if token_hash == old_hash:
                return Success(value=False)
            return await real_revoke(token_hash, reason=reason)

        monkeypatch.setattr(h.tokens, "revoke", revoke_claimed_elsewhere)

        result = await h.service.refresh(
            RefreshAccessToken(refresh_token=login.refresh_token)
        )

        assert result == Failure(error=INVALID_REFRESH_TOKEN)
        assert "refresh_rotation_lost" in logged_events(h.logger, "warning")
        records = list(h.tokens._tokens.values())
        assert len(records) == 2
        assert [r.token_hash for r in records if not r.is_revoked()] == [old_hash]

    async def test_refresh_never_touches_limiter(self, h):
        await h.service.refresh(RefreshAccessToken(refresh_token="forged"))

        assert await attempts(h) == 0


@pytest.mark.unit
class TestRoundTrip:
    """Login -> refresh -> logout -> refresh."""

    async def test_round_trip_without_rotation(self):
        h = build_harness(rotate=False)
        login = await login_ok(h)
        command = RefreshAccessToken(refresh_token=login.refresh_token)

        assert isinstance(await h.service.refresh(command), Success)
        assert await h.service.logout(
            LogoutUser(refresh_token=login.refresh_token)
        ) == Success(value=None)
        assert await h.service.refresh(command) == Failure(error=INVALID_REFRESH_TOKEN)

    async def test_round_trip_with_rotation(self, h):
        login = await login_ok(h)
        rotated = (
            await h.service.refresh(RefreshAccessToken(refresh_token=login.refresh_token))
        ).value

        await h.service.logout(LogoutUser(refresh_token=rotated.refresh_token))
        result = await h.service.refresh(
            RefreshAccessToken(refresh_token=rotated.refresh_token)
        )

        assert result == Failure(error=INVALID_REFRESH_TOKEN)


# =============================================================================
# Logout / Me / verify_access_token
# =============================================================================


@pytest.mark.unit
class TestLogout:
    async def test_logout_is_idempotent(self, h):
        login = await login_ok(h)
        command = LogoutUser(refresh_token=login.refresh_token)

        assert await h.service.logout(command) == Success(value=None)
        assert await h.service.logout(command) == Success(value=None)

    async def test_logout_unknown_token_succeeds(self, h):
        assert await h.service.logout(
            LogoutUser(refresh_token="never-issued")
        ) == Success(value=None)

    async def test_logout_all(self, h):
        sessions = [await login_ok(h) for _ in range(3)]

        result = await h.service.logout(LogoutUser(user_id=h.user.id))

        assert result == Success(value=None)
        for session in sessions:
            record = (
                await h.tokens.find_by_hash(
                    h.refresh_token_service.hash_token(session.refresh_token)
                )
            ).value
            assert record.revoked_reason is RevocationReason.LOGOUT_ALL

    async def test_logout_all_without_sessions_succeeds(self, h):
        assert await h.service.logout(LogoutUser(user_id=uuid7())) == Success(
            value=None
        )

    async def test_logout_requires_a_target(self, h):
        result = await h.service.logout(LogoutUser())

        assert result.error.code is ErrorCode.INVALID_CREDENTIALS_FORMAT

    async def test_store_failure(self):
        tokens = AsyncMock()
        tokens.revoke_all_for_user.return_value = Failure(
            error=Mock(code=ErrorCode.STORAGE_UNAVAILABLE, cause=OSError("db"))
        )
        h = build_harness(refresh_token_repo=tokens)

        result = await h.service.logout(LogoutUser(user_id=uuid7()))

        assert result.error.code is ErrorCode.STORAGE_UNAVAILABLE


@pytest.mark.unit
class TestMe:
    async def test_profile(self, h):
        result = await h.service.me(GetCurrentUser(user_id=h.user.id))

        assert result == Success(value=UserProfile.from_user(h.user))

    async def test_missing_user(self, h):
        result = await h.service.me(GetCurrentUser(user_id=uuid7()))

        assert result == Failure(error=USER_NOT_FOUND)
        assert not result.error.is_internal

    async def test_inactive_user(self, h):
        h.users.add(replace(h.user, status=UserStatus.INACTIVE))

        result = await h.service.me(GetCurrentUser(user_id=h.user.id))

        assert result == Failure(error=USER_NOT_FOUND)


@pytest.mark.unit
class TestVerifyAccessToken:
    def test_garbage_is_invalid(self, h):
        result = h.service.verify_access_token("garbage")

        assert result.error.code is ErrorCode.ACCESS_TOKEN_INVALID

    def test_expired_maps_to_access_token_expired(self):
        token_service = Mock(wraps=JWTService(secret_key=SECRET_KEY))
        token_service.validate_access_token.return_value = Failure(
            error=TokenError(code=ErrorCode.TOKEN_EXPIRED, message="expired")
        )
        h = build_harness(token_service=token_service)

        result = h.service.verify_access_token("whatever")

        assert result.error.code is ErrorCode.ACCESS_TOKEN_EXPIRED


@pytest.mark.unit
class TestSessionServiceConstruction:
    def test_non_positive_default_timeout_raises(self):
        with pytest.raises(ValueError, match="default_timeout"):
            build_harness(default_timeout=0)
