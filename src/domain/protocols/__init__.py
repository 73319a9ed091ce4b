"""Domain protocols (ports) package.

This package contains protocol definitions that the domain layer needs.
Infrastructure adapters implement these protocols without inheritance.

Usage:
    # Service protocols
    from src.domain.protocols import PasswordHashingProtocol, TokenIssuerProtocol

    # Repository protocols
    from src.domain.protocols import RefreshTokenRepository, UserRepository
"""

# Service protocols
from src.domain.protocols.captcha_protocol import CaptchaVerifierProtocol
from src.domain.protocols.logger_protocol import LoggerProtocol
from src.domain.protocols.password_hashing_protocol import PasswordHashingProtocol
from src.domain.protocols.rate_limit_protocol import (
    RateLimitProtocol,
    RateLimitStorage,
)
from src.domain.protocols.refresh_token_service_protocol import (
    RefreshTokenServiceProtocol,
)
from src.domain.protocols.token_issuer_protocol import TokenIssuerProtocol

# Repository protocols
from src.domain.protocols.refresh_token_repository import RefreshTokenRepository
from src.domain.protocols.user_repository import UserRepository

__all__ = [
    # Service protocols
    "CaptchaVerifierProtocol",
    "LoggerProtocol",
    "PasswordHashingProtocol",
    "RateLimitProtocol",
    "RateLimitStorage",
    "RefreshTokenServiceProtocol",
    "TokenIssuerProtocol",
    # Repository protocols
    "RefreshTokenRepository",
    "UserRepository",
]
