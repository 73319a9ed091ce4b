"""Infrastructure dependency factories.

Application-scoped singletons for core infrastructure services:
- Logging (structlog console adapter)
- Password hashing (bcrypt)
- Token issuance (JWT + opaque refresh secrets)
- Database (SQLAlchemy async engine, optional)
- Rate limiting (fixed window over Redis or in-memory storage)
- CAPTCHA verification

Each factory is cached with lru_cache; tests reset state with
``factory.cache_clear()``.
"""

from functools import lru_cache
from typing import TYPE_CHECKING

from src.core.config import get_settings

if TYPE_CHECKING:
    from src.domain.protocols import (
        CaptchaVerifierProtocol,
        LoggerProtocol,
        PasswordHashingProtocol,
        RateLimitProtocol,
        RefreshTokenServiceProtocol,
        TokenIssuerProtocol,
    )
    from src.infrastructure.persistence.database import Database


# ============================================================================
# Logging (Application-Scoped)
# ============================================================================


@lru_cache()
def get_logger() -> "LoggerProtocol":
    """Return the application-scoped logger singleton.

    Adapter selection is centralized here (composition root):
    - development: ConsoleAdapter (human-readable)
    - testing/ci/production: ConsoleAdapter (JSON)

    Returns:
        LoggerProtocol: Logger instance implementing the protocol.
    """
    from src.infrastructure.logging.console_adapter import ConsoleAdapter

    settings = get_settings()
    return ConsoleAdapter(
        use_json=not settings.is_development,
        level=settings.log_level,
    ).bind(app=settings.app_name, environment=settings.environment.value)


# ============================================================================
# Security Services (Application-Scoped)
# ============================================================================


@lru_cache()
def get_password_service() -> "PasswordHashingProtocol":
    """Get password hashing service singleton (app-scoped).

    Returns BcryptPasswordService with the configured cost factor.

    Usage:
        password_service = get_password_service()
        result = password_service.hash_password("SecurePass123!")
    """
    from src.infrastructure.security.bcrypt_password_service import (
        BcryptPasswordService,
    )

    return BcryptPasswordService(cost_factor=get_settings().bcrypt_rounds)


@lru_cache()
def get_token_service() -> "TokenIssuerProtocol":
    """Get token issuer singleton (app-scoped).

    Returns JWTService configured from SECRET_KEY, JWT_ALGORITHM and
    ACCESS_TOKEN_EXPIRE_MINUTES.
    """
    from src.infrastructure.security.jwt_service import JWTService

    settings = get_settings()
    return JWTService(
        secret_key=settings.secret_key,
        expiration_minutes=settings.access_token_expire_minutes,
        algorithm=settings.jwt_algorithm,
    )


@lru_cache()
def get_refresh_token_service() -> "RefreshTokenServiceProtocol":
    """Get refresh secret digest/lifetime service singleton (app-scoped)."""
    from src.infrastructure.security.refresh_token_service import (
        RefreshTokenService,
    )

    settings = get_settings()
    return RefreshTokenService(
        salt=settings.refresh_token_salt,
        expiration_days=settings.refresh_token_expire_days,
    )


# ============================================================================
# Database (Application-Scoped)
# ============================================================================


@lru_cache()
def get_database() -> "Database":
    """Get database manager singleton (app-scoped).

    Returns Database instance with connection pool.

    Raises:
        RuntimeError: If DATABASE_URL is not configured.
    """
    from src.infrastructure.persistence.database import Database

    settings = get_settings()
    if not settings.database_url:
        raise RuntimeError("DATABASE_URL is not configured")
    return Database(database_url=settings.database_url, echo=settings.db_echo)


# ============================================================================
# Rate Limiting (Application-Scoped)
# ============================================================================


@lru_cache()
def get_rate_limiter() -> "RateLimitProtocol":
    """Get login rate limiter singleton (app-scoped).

    Storage selection:
        - RATE_LIMIT_ENABLED=false: DisabledRateLimiter
        - REDIS_URL set: RedisRateLimitStorage (shared across processes)
        - otherwise: InMemoryRateLimitStorage (single process)

    Fail-Closed Design:
        Storage failures surface as Failure results and the session service
        refuses the login. An unreachable Redis never lets uncounted
        attempts through.
    """
    from src.infrastructure.rate_limit import (
        DisabledRateLimiter,
        FixedWindowRateLimiter,
        InMemoryRateLimitStorage,
        RedisRateLimitStorage,
    )

    settings = get_settings()
    if not settings.rate_limit_enabled:
        return DisabledRateLimiter()

    if settings.redis_url:
        from redis.asyncio import ConnectionPool, Redis

        pool = ConnectionPool.from_url(
            settings.redis_url,
            max_connections=20,
            decode_responses=False,
            socket_connect_timeout=5,
            socket_timeout=5,
            retry_on_timeout=True,
            socket_keepalive=True,
        )
        storage: RedisRateLimitStorage | InMemoryRateLimitStorage = (
            RedisRateLimitStorage(redis_client=Redis(connection_pool=pool))
        )
    else:
        storage = InMemoryRateLimitStorage()

    return FixedWindowRateLimiter(storage=storage, logger=get_logger())


# ============================================================================
# CAPTCHA (Application-Scoped)
# ============================================================================


@lru_cache()
def get_captcha_verifier() -> "CaptchaVerifierProtocol":
    """Get CAPTCHA verifier singleton (app-scoped).

    No provider is integrated. With CAPTCHA_ENABLED=true the gate still runs,
    but the no-op verifier accepts any non-empty token, so a warning is
    logged once at wiring time.
    """
    from src.infrastructure.captcha import NoopCaptchaVerifier

    enabled = get_settings().captcha_enabled
    if enabled:
        get_logger().warning(
            "captcha_provider_missing",
            verifier="noop",
            effect="any non-empty captcha token is accepted",
        )
    return NoopCaptchaVerifier(enabled=enabled)
