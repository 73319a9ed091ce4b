"""Password hashing error types.

Returned by PasswordHashingProtocol implementations. A mismatching password
is NOT an error: verify_password returns Success(False) for it.

Usage:
    from src.domain.errors import PasswordHashingError
    from src.core.enums import ErrorCode

    return Failure(error=PasswordHashingError(
        code=ErrorCode.VERIFICATION_FAILED,
        message="Stored password digest is malformed",
    ))
"""

from dataclasses import dataclass

from src.core.errors import DomainError


@dataclass(frozen=True, slots=True, kw_only=True)
class PasswordHashingError(DomainError):
    """Password hashing or verification failure.

    Codes:
        EMPTY_INPUT: Empty password or digest supplied.
        HASHING_FAILED: The hashing primitive raised.
        VERIFICATION_FAILED: The stored digest is malformed.
    """

    pass  # Inherits all fields from DomainError
