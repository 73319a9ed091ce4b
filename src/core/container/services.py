"""Application service factories.

Wires SessionService and the CAPTCHA gate from the infrastructure and
repository factories.
"""

from datetime import timedelta
from functools import lru_cache

from src.application.services import CaptchaGatedLogin, SessionService
from src.core.config import get_settings
from src.core.container.infrastructure import (
    get_captcha_verifier,
    get_logger,
    get_password_service,
    get_rate_limiter,
    get_refresh_token_service,
    get_token_service,
)
from src.core.container.repositories import (
    get_refresh_token_repository,
    get_user_repository,
)
from src.domain.value_objects import LoginRateLimitPolicy


@lru_cache()
def get_login_policy() -> LoginRateLimitPolicy:
    """Build the login rate limit policy from settings."""
    settings = get_settings()
    return LoginRateLimitPolicy(
        limit=settings.login_attempt_limit,
        window=timedelta(seconds=settings.login_attempt_window_seconds),
        block_threshold=settings.brute_force_threshold,
        block_duration=timedelta(seconds=settings.brute_force_block_seconds),
        account_block_threshold=settings.account_lockout_threshold,
        account_window=timedelta(seconds=settings.account_lockout_window_seconds),
    )


@lru_cache()
def get_session_service() -> SessionService:
    """Get session service singleton (app-scoped).

    Usage:
        session_service = get_session_service()
        result = await session_service.login(command, RequestContext())
    """
    settings = get_settings()
    return SessionService(
        user_repo=get_user_repository(),
        refresh_token_repo=get_refresh_token_repository(),
        password_service=get_password_service(),
        token_service=get_token_service(),
        refresh_token_service=get_refresh_token_service(),
        rate_limiter=get_rate_limiter(),
        policy=get_login_policy(),
        logger=get_logger(),
        rotate_refresh_tokens=settings.refresh_token_rotation,
        default_timeout=settings.request_timeout_seconds,
    )


@lru_cache()
def get_captcha_gated_login() -> CaptchaGatedLogin:
    """Get the CAPTCHA-gated login entry point (app-scoped)."""
    return CaptchaGatedLogin(
        session_service=get_session_service(),
        captcha_verifier=get_captcha_verifier(),
        logger=get_logger(),
    )
