"""Container module - Centralized dependency injection.

This module re-exports all factory functions from submodules:

    from src.core.container import get_session_service, get_rate_limiter, ...

The container is organized into modules by concern:
- infrastructure: Core services (logging, security, db, rate limiting, captcha)
- repositories: Repository factories
- services: Session service and login gate
"""

# Infrastructure services
from src.core.container.infrastructure import (
    get_captcha_verifier,
    get_database,
    get_logger,
    get_password_service,
    get_rate_limiter,
    get_refresh_token_service,
    get_token_service,
)

# Repositories
from src.core.container.repositories import (
    get_refresh_token_repository,
    get_user_repository,
)

# Application services
from src.core.container.services import (
    get_captcha_gated_login,
    get_login_policy,
    get_session_service,
)

__all__ = [
    # Infrastructure
    "get_captcha_verifier",
    "get_database",
    "get_logger",
    "get_password_service",
    "get_rate_limiter",
    "get_refresh_token_service",
    "get_token_service",
    # Repositories
    "get_refresh_token_repository",
    "get_user_repository",
    # Application services
    "get_captcha_gated_login",
    "get_login_policy",
    "get_session_service",
]
