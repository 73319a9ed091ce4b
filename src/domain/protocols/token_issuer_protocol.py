"""Token issuer protocol for domain layer.

Issues short-lived signed access tokens and opaque refresh secrets, and
validates access tokens statelessly.

Architecture:
    - Domain defines protocol (port)
    - Infrastructure implements adapter (JWTService)
"""

from datetime import timedelta
from typing import Protocol

from src.core.result import Result
from src.domain.errors import TokenError
from src.domain.value_objects.token_claims import TokenClaims


class TokenIssuerProtocol(Protocol):
    """Access token and refresh secret issuance interface.

    Usage:
        match token_service.issue_access_token(claims):
            case Success(value=access_token):
                ...
            case Failure(error=error):
                ...  # SIGNING_FAILED
    """

    @property
    def access_token_ttl(self) -> timedelta:
        """Validity window of issued access tokens."""
        ...

    def issue_access_token(self, claims: TokenClaims) -> Result[str, TokenError]:
        """Sign an access token carrying the claims.

        Returns:
            Success(token) or Failure(SIGNING_FAILED).
        """
        ...

    def issue_refresh_secret(self) -> Result[str, TokenError]:
        """Generate an opaque refresh secret (>= 256 bits of entropy).

        Returns:
            Success(secret) or Failure(SECRET_GENERATION_FAILED).
        """
        ...

    def validate_access_token(self, token: str) -> Result[TokenClaims, TokenError]:
        """Verify signature and expiry and extract claims.

        Returns:
            Success(claims) or Failure with TOKEN_INVALID_SIGNATURE,
            TOKEN_EXPIRED or TOKEN_MALFORMED. Never partial claims.
        """
        ...
