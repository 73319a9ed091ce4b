"""Token issuance and validation error types.

Returned by TokenIssuerProtocol implementations. Validation failures keep
their precise reason here; the session service decides what the caller
sees.
"""

from dataclasses import dataclass

from src.core.errors import DomainError


@dataclass(frozen=True, slots=True, kw_only=True)
class TokenError(DomainError):
    """Access token or refresh secret failure.

    Codes:
        SIGNING_FAILED: The signing primitive raised.
        SECRET_GENERATION_FAILED: The entropy source failed.
        TOKEN_INVALID_SIGNATURE: Signature does not verify.
        TOKEN_EXPIRED: ``exp`` is in the past.
        TOKEN_MALFORMED: Not a JWT, wrong type, or missing claims.
    """

    pass  # Inherits all fields from DomainError
