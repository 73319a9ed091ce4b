"""JWT token service (adapter).

This service implements the TokenIssuerProtocol using PyJWT with HMAC-SHA256
for access tokens and ``secrets`` for opaque refresh secrets.

Architecture:
    - Implements TokenIssuerProtocol (no inheritance required)
    - Structural typing via Protocol
    - Injected via dependency container

Security:
    - HMAC-SHA256 (HS256) algorithm
    - 256-bit secret key minimum
    - 15-minute token expiration by default
    - Unique JWT ID (jti) for tracking
    - ``type`` claim pins the token to access use
    - Refresh secrets carry 256 bits of entropy and are never JWTs

Performance:
    - Stateless validation (no database lookup)
"""

import secrets
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID

import jwt
from jwt.exceptions import (
    ExpiredSignatureError,
    InvalidSignatureError,
    InvalidTokenError,
    PyJWTError,
)
from uuid_extensions import uuid7

from src.core.enums import ErrorCode
from src.core.result import Failure, Result, Success
from src.domain.errors import TokenError
from src.domain.value_objects.token_claims import TokenClaims

ACCESS_TOKEN_TYPE = "access"
REFRESH_SECRET_BYTES = 32


class JWTService:
    """JWT access token and refresh secret service.

    Usage:
        from src.core.container import get_token_service

        token_service = get_token_service()

        match token_service.issue_access_token(
            TokenClaims(user_id=user.id, email=user.email, role=user.role)
        ):
            case Success(value=token):
                ...

        result = token_service.validate_access_token(token)
    """

    def __init__(
        self,
        secret_key: str,
        expiration_minutes: int = 15,
        algorithm: str = "HS256",
    ) -> None:
        """Initialize JWT service.

        Args:
            secret_key: Secret key for HMAC signing.
                MUST be at least 256 bits (32 bytes) for security.
            expiration_minutes: Token expiration in minutes (default: 15).
            algorithm: HMAC algorithm name (default: HS256).

        Raises:
            ValueError: If secret_key is too short (< 32 bytes) or the
                expiration is not positive.
        """
        if len(secret_key) < 32:
            msg = "JWT secret key must be at least 32 bytes (256 bits)"
            raise ValueError(msg)
        if expiration_minutes <= 0:
            msg = "Access token expiration must be positive"
            raise ValueError(msg)

        self._secret_key = secret_key
        self._expiration = timedelta(minutes=expiration_minutes)
        self._algorithm = algorithm

    @property
    def access_token_ttl(self) -> timedelta:
        """Validity window of issued access tokens."""
        return self._expiration

    def issue_access_token(self, claims: TokenClaims) -> Result[str, TokenError]:
        """Generate a signed JWT access token.

        Args:
            claims: Identity to embed.

        Returns:
            Success(token) or Failure(SIGNING_FAILED).

        Example:
            >>> service = JWTService(secret_key="x" * 32)
            >>> result = service.issue_access_token(
            ...     TokenClaims(user_id=uuid7(), email="user@example.com", role="user")
            ... )
            >>> len(result.value.split("."))
            3
        """
        now = datetime.now(UTC)
        expires_at = now + self._expiration

        payload: dict[str, Any] = {
            "sub": str(claims.user_id),  # Subject (user ID)
            "email": claims.email,
            "role": claims.role,
            "type": ACCESS_TOKEN_TYPE,
            "iat": int(now.timestamp()),  # Issued at
            "exp": int(expires_at.timestamp()),  # Expires at
            "jti": str(uuid7()),  # JWT ID (unique identifier)
        }

        try:
            token: str = jwt.encode(
                payload, self._secret_key, algorithm=self._algorithm
            )
        except (PyJWTError, NotImplementedError, TypeError, ValueError) as exc:
            return Failure(
                error=TokenError(
                    code=ErrorCode.SIGNING_FAILED,
                    message="Access token signing failed",
                    cause=exc,
                )
            )

        return Success(value=token)

    def issue_refresh_secret(self) -> Result[str, TokenError]:
        """Generate an opaque refresh secret.

        Returns:
            Success with a urlsafe base64 string (~43 characters, 256 bits of
            entropy), or Failure(SECRET_GENERATION_FAILED) if the OS entropy
            source fails.
        """
        try:
            return Success(value=secrets.token_urlsafe(REFRESH_SECRET_BYTES))
        except (OSError, NotImplementedError) as exc:
            return Failure(
                error=TokenError(
                    code=ErrorCode.SECRET_GENERATION_FAILED,
                    message="Refresh secret generation failed",
                    cause=exc,
                )
            )

    def validate_access_token(self, token: str) -> Result[TokenClaims, TokenError]:
        """Validate a JWT access token and extract its claims.

        PyJWT checks the signature before the expiry, so a tampered and
        expired token reports TOKEN_INVALID_SIGNATURE.

        Args:
            token: JWT access token string to validate.

        Returns:
            Success(TokenClaims) or Failure with TOKEN_INVALID_SIGNATURE,
            TOKEN_EXPIRED or TOKEN_MALFORMED.
        """
        try:
            payload: dict[str, Any] = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={"require": ["exp", "iat", "sub"]},
            )
        except ExpiredSignatureError as exc:
            return _token_failure(ErrorCode.TOKEN_EXPIRED, "Token has expired", exc)
        except InvalidSignatureError as exc:
            return _token_failure(
                ErrorCode.TOKEN_INVALID_SIGNATURE, "Token signature is invalid", exc
            )
        except InvalidTokenError as exc:
            return _token_failure(ErrorCode.TOKEN_MALFORMED, "Token is malformed", exc)

        if payload.get("type") != ACCESS_TOKEN_TYPE:
            return _token_failure(ErrorCode.TOKEN_MALFORMED, "Not an access token")

        email = payload.get("email")
        role = payload.get("role")
        if not isinstance(email, str) or not isinstance(role, str):
            return _token_failure(ErrorCode.TOKEN_MALFORMED, "Token claims incomplete")

        try:
            user_id = UUID(str(payload["sub"]))
        except ValueError as exc:
            return _token_failure(ErrorCode.TOKEN_MALFORMED, "Token subject invalid", exc)

        return Success(value=TokenClaims(user_id=user_id, email=email, role=role))


def _token_failure(
    code: ErrorCode, message: str, cause: BaseException | None = None
) -> Failure[TokenError]:
    return Failure(error=TokenError(code=code, message=message, cause=cause))
