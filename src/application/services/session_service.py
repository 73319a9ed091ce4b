"""Session service: login, refresh, logout and current-user lookup.

Flow (login):
1. Refuse if the rate-limit key is locked out
2. Refuse if the key has used up its attempts for the current window
3. Validate credential shape (not counted against the limiter)
4. Find user by email (absent or inactive -> counted failure)
5. Locked account -> counted failure, indistinguishable from step 4
6. Verify password (mismatch -> counted against the key and the account,
   each locking out at its own threshold)
7. Issue access token and refresh secret, persist the refresh record

Flow (refresh):
1. Find the record by the digest of the presented secret
2. Reject revoked or expired records (revoked-by-rotation -> reuse response)
3. Re-read the owner and issue an access token from current claims
4. Rotate: persist the new secret, then claim the old record (a lost claim
   revokes the new record again)

Error policy:
- Only SessionError leaves this service
- Absent user, inactive user and wrong password share INVALID_CREDENTIALS
- Every unusable refresh token shares INVALID_REFRESH_TOKEN
- Rate limiter storage failures fail closed (STORAGE_UNAVAILABLE)
- Precise reasons go to the log, never to the caller

Architecture:
- Application layer ONLY imports from domain layer (entities, protocols, errors)
- NO infrastructure imports (adapters are injected via protocols)
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, TypeVar
from uuid import UUID

from uuid_extensions import uuid7

from src.application.dtos.auth_dtos import LoginResponse, RefreshResponse, UserProfile
from src.application.dtos.request_context import RequestContext
from src.core.enums import ErrorCode
from src.core.errors import DomainError
from src.core.result import Failure, Result, Success
from src.domain.entities.refresh_token import RefreshToken
from src.domain.enums import RevocationReason
from src.domain.errors import SessionError
from src.domain.errors.session_error import (
    INVALID_CREDENTIALS,
    INVALID_REFRESH_TOKEN,
    RATE_LIMITED,
    USER_NOT_FOUND,
    internal_error,
)
from src.domain.value_objects.credentials import Credentials
from src.domain.value_objects.rate_limit_policy import (
    ACCOUNT_LOCKOUT_REASON,
    BRUTE_FORCE_REASON,
    LoginRateLimitPolicy,
)
from src.domain.value_objects.token_claims import TokenClaims

if TYPE_CHECKING:
    from src.application.commands.auth_commands import (
        LoginUser,
        LogoutUser,
        RefreshAccessToken,
    )
    from src.application.queries.auth_queries import GetCurrentUser
    from src.domain.entities.user import User
    from src.domain.protocols import (
        LoggerProtocol,
        PasswordHashingProtocol,
        RateLimitProtocol,
        RefreshTokenRepository,
        RefreshTokenServiceProtocol,
        TokenIssuerProtocol,
        UserRepository,
    )

T = TypeVar("T")

DEFAULT_TIMEOUT_SECONDS = 5.0
# Verified against when no real digest exists, so unknown emails cost a bcrypt check
_DUMMY_PASSWORD = "timing-equalisation-password"


class SessionService:
    """Session lifecycle orchestrator.

    Owns no data: users, refresh tokens and rate-limit records belong to
    the injected adapters. Each operation is bounded by the request
    context's timeout.

    Example:
        >>> service = get_session_service()
        >>> result = await service.login(
        ...     LoginUser(
        ...         email="user@example.com",
        ...         password="SecurePass123!",
        ...         rate_limit_key="203.0.113.7",
        ...     ),
        ...     RequestContext(timeout_seconds=2.0),
        ... )
        >>> match result:
        ...     case Success(value=response):
        ...         response.access_token
        ...     case Failure(error=error):
        ...         error.code
    """

    def __init__(
        self,
        *,
        user_repo: UserRepository,
        refresh_token_repo: RefreshTokenRepository,
        password_service: PasswordHashingProtocol,
        token_service: TokenIssuerProtocol,
        refresh_token_service: RefreshTokenServiceProtocol,
        rate_limiter: RateLimitProtocol,
        policy: LoginRateLimitPolicy,
        logger: LoggerProtocol,
        rotate_refresh_tokens: bool = True,
        default_timeout: float = DEFAULT_TIMEOUT_SECONDS,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize session service with dependencies.

        Args:
            user_repo: User lookup.
            refresh_token_repo: Refresh token ledger.
            password_service: Password verification (bcrypt).
            token_service: Access token and refresh secret issuer.
            refresh_token_service: Refresh secret digest and lifetime policy.
            rate_limiter: Login limiter.
            policy: Login limit, window and lockout configuration.
            logger: Structured logger.
            rotate_refresh_tokens: Issue a new refresh secret on every refresh.
            default_timeout: Seconds allowed per operation when the request
                context sets none.
            clock: Returns the current UTC instant (injectable for tests).
        """
        if default_timeout <= 0:
            raise ValueError("default_timeout must be positive")

        self._user_repo = user_repo
        self._refresh_token_repo = refresh_token_repo
        self._password_service = password_service
        self._token_service = token_service
        self._refresh_token_service = refresh_token_service
        self._rate_limiter = rate_limiter
        self._policy = policy
        self._logger = logger
        self._rotate = rotate_refresh_tokens
        self._default_timeout = default_timeout
        self._clock = clock or (lambda: datetime.now(UTC))
        self._dummy_hash: str | None = None

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------
    async def login(
        self, command: LoginUser, ctx: RequestContext | None = None
    ) -> Result[LoginResponse, SessionError]:
        """Authenticate credentials and open a session.

        Args:
            command: LoginUser command.
            ctx: Request timeout and trace id.

        Returns:
            Success(LoginResponse), or Failure with INVALID_CREDENTIALS_FORMAT,
            INVALID_CREDENTIALS, RATE_LIMITED or an internal fault.

        Side Effects:
            - Increments the limiter count on every counted failure.
            - Blocks the key once the count reaches the lockout threshold.
            - Creates a RefreshToken record on success.
        """
        ctx = ctx or RequestContext()
        log = self._logger.bind(operation="login", trace_id=ctx.trace_id)
        return await self._bounded(ctx, log, lambda: self._login(command, log))

    async def refresh(
        self, command: RefreshAccessToken, ctx: RequestContext | None = None
    ) -> Result[RefreshResponse, SessionError]:
        """Exchange a refresh secret for a new access token.

        Returns:
            Success(RefreshResponse), or Failure with INVALID_REFRESH_TOKEN
            or an internal fault.
        """
        ctx = ctx or RequestContext()
        log = self._logger.bind(operation="refresh", trace_id=ctx.trace_id)
        return await self._bounded(ctx, log, lambda: self._refresh(command, log))

    async def logout(
        self, command: LogoutUser, ctx: RequestContext | None = None
    ) -> Result[None, SessionError]:
        """Revoke one session, or every session of a user.

        Unknown and already revoked tokens are successes.
        """
        ctx = ctx or RequestContext()
        log = self._logger.bind(operation="logout", trace_id=ctx.trace_id)
        return await self._bounded(ctx, log, lambda: self._logout(command, log))

    async def me(
        self, query: GetCurrentUser, ctx: RequestContext | None = None
    ) -> Result[UserProfile, SessionError]:
        """Return the public profile of an authenticated user.

        Returns:
            Success(UserProfile), Failure(USER_NOT_FOUND) when the account is
            gone or no longer active, or an internal fault.
        """
        ctx = ctx or RequestContext()
        log = self._logger.bind(operation="me", trace_id=ctx.trace_id)
        return await self._bounded(ctx, log, lambda: self._me(query, log))

    def verify_access_token(self, token: str) -> Result[TokenClaims, SessionError]:
        """Validate a bearer token presented to the transport layer."""
        match self._token_service.validate_access_token(token):
            case Success(value=claims):
                return Success(value=claims)
            case Failure(error=error) if error.code is ErrorCode.TOKEN_EXPIRED:
                return Failure(
                    error=SessionError(
                        code=ErrorCode.ACCESS_TOKEN_EXPIRED,
                        message="Access token expired",
                    )
                )
            case Failure(error=error):
                self._logger.debug(
                    "access_token_rejected", error_code=error.code.value
                )
                return Failure(
                    error=SessionError(
                        code=ErrorCode.ACCESS_TOKEN_INVALID,
                        message="Invalid access token",
                    )
                )

    # -------------------------------------------------------------------------
    # Login
    # -------------------------------------------------------------------------
    async def _login(
        self, command: LoginUser, log: LoggerProtocol
    ) -> Result[LoginResponse, SessionError]:
        key = command.rate_limit_key

        # Step 1: Active lockout (before any user lookup)
        match await self._rate_limiter.is_blocked(key):
            case Failure(error=error):
                return self._fault(log, "rate_limiter_unavailable", error)
            case Success(value=True):
                log.warning("login_rate_limited", key=key, reason="blocked")
                return Failure(error=RATE_LIMITED)

        # Step 2: Attempts left in the current window
        match await self._rate_limiter.check_limit(
            key, limit=self._policy.limit, window=self._policy.window
        ):
            case Failure(error=error):
                return self._fault(log, "rate_limiter_unavailable", error)
            case Success(value=False):
                log.warning("login_rate_limited", key=key, reason="limit_reached")
                return Failure(error=RATE_LIMITED)

        # Step 3: Credential shape (not counted, no lookup happened)
        try:
            credentials = Credentials(email=command.email, password=command.password)
        except ValueError as e:
            log.info("login_rejected", reason="invalid_format")
            return Failure(
                error=SessionError(
                    code=ErrorCode.INVALID_CREDENTIALS_FORMAT,
                    message=str(e),
                )
            )

        # Step 4: Find user by email
        match await self._user_repo.find_by_email(credentials.email):
            case Success(value=user) if user.is_active():
                pass
            case Success(value=user):
                await self._dummy_verify(credentials.password)
                return await self._login_failed(
                    key, log, reason="account_inactive", user_id=user.id
                )
            case Failure(error=error) if error.code is ErrorCode.USER_NOT_FOUND:
                await self._dummy_verify(credentials.password)
                return await self._login_failed(key, log, reason="unknown_email")
            case Failure(error=error):
                return self._fault(log, "user_lookup_failed", error)

        # Step 5: Account lockout; answered exactly like an unknown email
        account_key = self._policy.account_key(user.id)
        match await self._rate_limiter.is_blocked(account_key):
            case Failure(error=error):
                return self._fault(log, "rate_limiter_unavailable", error)
            case Success(value=True):
                log.warning("login_account_locked", user_id=str(user.id), key=key)
                await self._dummy_verify(credentials.password)
                return await self._login_failed(
                    key, log, reason="account_locked", user_id=user.id
                )

        # Step 6: Verify password (CPU-bound, off the event loop)
        match await asyncio.to_thread(
            self._password_service.verify_password,
            credentials.password,
            user.password_hash,
        ):
            case Success(value=True):
                pass
            case Success(value=False):
                return await self._login_failed(
                    key,
                    log,
                    reason="wrong_password",
                    user_id=user.id,
                    account_key=account_key,
                )
            case Failure(error=error):
                # Stored digest is unusable
                log.error(
                    "password_verification_failed",
                    error=error.cause,
                    error_code=error.code.value,
                    user_id=str(user.id),
                )
                return Failure(
                    error=internal_error(ErrorCode.HASHING_FAILED, error.cause)
                )

        # Step 7: Issue tokens (the limiter is not touched on success)
        match self._issue_access_token(user, log):
            case Failure(error=session_error):
                return Failure(error=session_error)
            case Success(value=access_token):
                pass

        refresh_ttl = self._refresh_token_service.token_ttl(
            persistent=command.remember_me
        )
        match await self._open_refresh_token(user.id, refresh_ttl, log):
            case Failure(error=session_error):
                return Failure(error=session_error)
            case Success(value=refresh_secret):
                pass

        log.info(
            "login_succeeded",
            user_id=str(user.id),
            remember_me=command.remember_me,
        )
        return Success(
            value=LoginResponse(
                access_token=access_token,
                refresh_token=refresh_secret,
                expires_in=int(self._token_service.access_token_ttl.total_seconds()),
                refresh_expires_in=int(refresh_ttl.total_seconds()),
                user=UserProfile.from_user(user),
            )
        )

    async def _login_failed(
        self,
        key: str,
        log: LoggerProtocol,
        *,
        reason: str,
        user_id: UUID | None = None,
        account_key: str | None = None,
    ) -> Result[LoginResponse, SessionError]:
        """Count one failed attempt and lock the key out at the threshold.

        With ``account_key`` (wrong password for a real account) the attempt
        is also counted against the account, which locks at its own
        threshold regardless of how many keys the attempts came from.
        """
        match await self._count_failure(
            key, self._policy.window, self._policy.block_threshold, BRUTE_FORCE_REASON
        ):
            case Failure(error=error):
                return self._fault(log, "rate_limiter_unavailable", error)
            case Success(value=attempts):
                pass

        account_attempts = None
        if account_key is not None:
            match await self._count_failure(
                account_key,
                self._policy.account_window,
                self._policy.account_block_threshold,
                ACCOUNT_LOCKOUT_REASON,
            ):
                case Failure(error=error):
                    return self._fault(log, "rate_limiter_unavailable", error)
                case Success(value=account_attempts):
                    pass

        log.info(
            "login_failed",
            reason=reason,
            key=key,
            attempts=attempts,
            account_attempts=account_attempts,
            user_id=str(user_id) if user_id else None,
        )
        return Failure(error=INVALID_CREDENTIALS)

    async def _count_failure(
        self, key: str, window: timedelta, threshold: int, block_reason: str
    ) -> Result[int, DomainError]:
        """Increment ``key`` and block it once ``threshold`` is reached."""
        match await self._rate_limiter.increment(key, window=window):
            case Failure(error=error):
                return Failure(error=error)
            case Success(value=attempts):
                pass

        if attempts >= threshold:
            match await self._rate_limiter.block(
                key, duration=self._policy.block_duration, reason=block_reason
            ):
                case Failure(error=error):
                    return Failure(error=error)
                case Success():
                    pass
        return Success(value=attempts)

    async def _dummy_verify(self, password: str) -> None:
        """Spend one bcrypt verification when there is no digest to check."""
        if self._dummy_hash is None:
            match await asyncio.to_thread(
                self._password_service.hash_password, _DUMMY_PASSWORD
            ):
                case Success(value=digest):
                    self._dummy_hash = digest
                case Failure():
                    return
        await asyncio.to_thread(
            self._password_service.verify_password, password, self._dummy_hash
        )

    # -------------------------------------------------------------------------
    # Refresh
    # -------------------------------------------------------------------------
    async def _refresh(
        self, command: RefreshAccessToken, log: LoggerProtocol
    ) -> Result[RefreshResponse, SessionError]:
        token_hash = self._refresh_token_service.hash_token(command.refresh_token)

        # Step 1: Find record by digest
        match await self._refresh_token_repo.find_by_hash(token_hash):
            case Success(value=record):
                pass
            case Failure(error=error) if (
                error.code is ErrorCode.REFRESH_TOKEN_NOT_FOUND
            ):
                log.info("refresh_rejected", reason="unknown_token")
                return Failure(error=INVALID_REFRESH_TOKEN)
            case Failure(error=error):
                return self._fault(log, "refresh_token_lookup_failed", error)

        # Step 2: Revoked or expired
        if record.is_revoked():
            if record.revoked_reason is RevocationReason.ROTATED:
                return await self._reuse_detected(record, log)
            log.info(
                "refresh_rejected",
                reason="revoked",
                token_id=str(record.id),
                revoked_reason=(
                    record.revoked_reason.value if record.revoked_reason else None
                ),
            )
            return Failure(error=INVALID_REFRESH_TOKEN)
        if record.is_expired(self._clock()):
            log.info("refresh_rejected", reason="expired", token_id=str(record.id))
            return Failure(error=INVALID_REFRESH_TOKEN)

        # Step 3: Current claims come from the user store, not the old token
        match await self._user_repo.find_by_id(record.user_id):
            case Success(value=user) if user.is_active():
                pass
            case Success():
                log.info(
                    "refresh_rejected",
                    reason="account_inactive",
                    user_id=str(record.user_id),
                )
                return Failure(error=INVALID_REFRESH_TOKEN)
            case Failure(error=error) if error.code is ErrorCode.USER_NOT_FOUND:
                log.info(
                    "refresh_rejected",
                    reason="owner_missing",
                    user_id=str(record.user_id),
                )
                return Failure(error=INVALID_REFRESH_TOKEN)
            case Failure(error=error):
                return self._fault(log, "user_lookup_failed", error)

        match self._issue_access_token(user, log):
            case Failure(error=session_error):
                return Failure(error=session_error)
            case Success(value=access_token):
                pass
        expires_in = int(self._token_service.access_token_ttl.total_seconds())

        if not self._rotate:
            log.info("token_refreshed", user_id=str(user.id), rotated=False)
            return Success(
                value=RefreshResponse(access_token=access_token, expires_in=expires_in)
            )

        # Step 4: Persist the successor first, so a failed write leaves the
        # presented secret usable for a retry
        lifetime = record.lifetime
        match await self._open_refresh_token(user.id, lifetime, log):
            case Failure(error=session_error):
                return Failure(error=session_error)
            case Success(value=refresh_secret):
                pass

        # Step 5: Claim the old record; exactly one concurrent refresh wins
        match await self._refresh_token_repo.revoke(
            token_hash, reason=RevocationReason.ROTATED
        ):
            case Success(value=True):
                pass
            case Success(value=False):
                log.warning(
                    "refresh_rotation_lost",
                    token_id=str(record.id),
                    user_id=str(user.id),
                )
                await self._discard_successor(refresh_secret, log)
                return Failure(error=INVALID_REFRESH_TOKEN)
            case Failure(error=error) if (
                error.code is ErrorCode.REFRESH_TOKEN_NOT_FOUND
            ):
                await self._discard_successor(refresh_secret, log)
                return Failure(error=INVALID_REFRESH_TOKEN)
            case Failure(error=error):
                await self._discard_successor(refresh_secret, log)
                return self._fault(log, "refresh_token_revoke_failed", error)

        log.info("token_refreshed", user_id=str(user.id), rotated=True)
        return Success(
            value=RefreshResponse(
                access_token=access_token,
                expires_in=expires_in,
                refresh_token=refresh_secret,
                refresh_expires_in=int(lifetime.total_seconds()),
            )
        )

    async def _reuse_detected(
        self, record: RefreshToken, log: LoggerProtocol
    ) -> Result[RefreshResponse, SessionError]:
        """A rotated-out secret came back: end every session of its owner."""
        match await self._refresh_token_repo.revoke_all_for_user(
            record.user_id, reason=RevocationReason.REUSE_DETECTED
        ):
            case Failure(error=error):
                return self._fault(log, "refresh_token_revoke_failed", error)
            case Success(value=revoked):
                log.warning(
                    "refresh_token_reuse_detected",
                    token_id=str(record.id),
                    user_id=str(record.user_id),
                    revoked=revoked,
                )
        return Failure(error=INVALID_REFRESH_TOKEN)

    async def _discard_successor(self, secret: str, log: LoggerProtocol) -> None:
        """Revoke a successor record whose secret was never handed out."""
        token_hash = self._refresh_token_service.hash_token(secret)
        match await self._refresh_token_repo.revoke(
            token_hash, reason=RevocationReason.ROTATED
        ):
            case Failure(error=error):
                # Left live until expiry; the secret exists nowhere else
                log.error(
                    "refresh_successor_discard_failed",
                    error=error.cause,
                    error_code=error.code.value,
                )
            case Success():
                pass

    # -------------------------------------------------------------------------
    # Logout / Me
    # -------------------------------------------------------------------------
    async def _logout(
        self, command: LogoutUser, log: LoggerProtocol
    ) -> Result[None, SessionError]:
        if command.refresh_token is not None:
            token_hash = self._refresh_token_service.hash_token(command.refresh_token)
            match await self._refresh_token_repo.revoke(
                token_hash, reason=RevocationReason.LOGOUT
            ):
                case Success(value=revoked):
                    log.info("logout", revoked=revoked)
                case Failure(error=error) if (
                    error.code is ErrorCode.REFRESH_TOKEN_NOT_FOUND
                ):
                    log.info("logout", revoked=False, reason="unknown_token")
                case Failure(error=error):
                    return self._fault(log, "refresh_token_revoke_failed", error)
            return Success(value=None)

        if command.user_id is not None:
            match await self._refresh_token_repo.revoke_all_for_user(
                command.user_id, reason=RevocationReason.LOGOUT_ALL
            ):
                case Success(value=revoked):
                    log.info(
                        "logout_all", user_id=str(command.user_id), revoked=revoked
                    )
                case Failure(error=error):
                    return self._fault(log, "refresh_token_revoke_failed", error)
            return Success(value=None)

        return Failure(
            error=SessionError(
                code=ErrorCode.INVALID_CREDENTIALS_FORMAT,
                message="Either refresh_token or user_id is required",
            )
        )

    async def _me(
        self, query: GetCurrentUser, log: LoggerProtocol
    ) -> Result[UserProfile, SessionError]:
        match await self._user_repo.find_by_id(query.user_id):
            case Success(value=user) if user.is_active():
                return Success(value=UserProfile.from_user(user))
            case Success():
                log.info("profile_unavailable", reason="account_inactive")
                return Failure(error=USER_NOT_FOUND)
            case Failure(error=error) if error.code is ErrorCode.USER_NOT_FOUND:
                log.info("profile_unavailable", reason="owner_missing")
                return Failure(error=USER_NOT_FOUND)
            case Failure(error=error):
                return self._fault(log, "user_lookup_failed", error)

    # -------------------------------------------------------------------------
    # Internal helpers
    # -------------------------------------------------------------------------
    def _issue_access_token(
        self, user: User, log: LoggerProtocol
    ) -> Result[str, SessionError]:
        claims = TokenClaims(user_id=user.id, email=user.email, role=user.role)
        match self._token_service.issue_access_token(claims):
            case Success(value=token):
                return Success(value=token)
            case Failure(error=error):
                log.error(
                    "access_token_signing_failed",
                    error=error.cause,
                    error_code=error.code.value,
                )
                return Failure(
                    error=internal_error(ErrorCode.SIGNING_FAILED, error.cause)
                )

    async def _open_refresh_token(
        self, user_id: UUID, lifetime: timedelta, log: LoggerProtocol
    ) -> Result[str, SessionError]:
        """Generate a refresh secret and persist its record.

        Returns:
            Success(plaintext secret). The secret is never stored.
        """
        match self._token_service.issue_refresh_secret():
            case Success(value=secret):
                pass
            case Failure(error=error):
                log.critical(
                    "refresh_secret_generation_failed",
                    error=error.cause,
                    error_code=error.code.value,
                )
                return Failure(
                    error=internal_error(ErrorCode.SIGNING_FAILED, error.cause)
                )

        now = self._clock()
        record = RefreshToken(
            id=uuid7(),
            user_id=user_id,
            token_hash=self._refresh_token_service.hash_token(secret),
            expires_at=now + lifetime,
            created_at=now,
        )
        match await self._refresh_token_repo.create(record):
            case Success():
                return Success(value=secret)
            case Failure(error=error):
                return self._fault(log, "refresh_token_create_failed", error)

    def _fault(
        self, log: LoggerProtocol, event: str, error: DomainError
    ) -> Failure[SessionError]:
        """Log a component failure and hide it behind STORAGE_UNAVAILABLE."""
        log.error(event, error=error.cause, error_code=error.code.value)
        return Failure(
            error=internal_error(ErrorCode.STORAGE_UNAVAILABLE, error.cause)
        )

    async def _bounded(
        self,
        ctx: RequestContext,
        log: LoggerProtocol,
        operation: Callable[[], Awaitable[Result[T, SessionError]]],
    ) -> Result[T, SessionError]:
        """Run one operation under the request deadline."""
        timeout = (
            self._default_timeout if ctx.timeout_seconds is None else ctx.timeout_seconds
        )
        try:
            async with asyncio.timeout(timeout):
                return await operation()
        except TimeoutError as e:
            log.error("operation_timed_out", error=e, timeout_seconds=timeout)
            return Failure(error=internal_error(ErrorCode.REQUEST_TIMEOUT, e))
