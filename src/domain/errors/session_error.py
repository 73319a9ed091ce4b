"""Caller-visible session errors.

SessionError is the only error type that leaves the session service. Its
codes form the closed set a transport layer maps to responses. Internal
faults carry a generic message; the underlying cause is attached for logs
and excluded from equality and repr.

Enumeration safety:
    The merged errors below are module-level singletons, so an unknown
    email and a wrong password produce equal values, as do every flavour
    of unusable refresh token.
"""

from dataclasses import dataclass

from src.core.enums import ErrorCode
from src.core.errors import DomainError

INTERNAL_ERROR_CODES = frozenset(
    {
        ErrorCode.HASHING_FAILED,
        ErrorCode.SIGNING_FAILED,
        ErrorCode.STORAGE_UNAVAILABLE,
        ErrorCode.REQUEST_TIMEOUT,
    }
)


@dataclass(frozen=True, slots=True, kw_only=True)
class SessionError(DomainError):
    """Error returned by SessionService operations.

    Codes:
        INVALID_CREDENTIALS_FORMAT, INVALID_CREDENTIALS, RATE_LIMITED,
        INVALID_REFRESH_TOKEN, USER_NOT_FOUND, ACCESS_TOKEN_INVALID,
        ACCESS_TOKEN_EXPIRED, CAPTCHA_INVALID, plus the internal faults
        HASHING_FAILED, SIGNING_FAILED, STORAGE_UNAVAILABLE, REQUEST_TIMEOUT.
    """

    @property
    def is_internal(self) -> bool:
        """True for infrastructure faults the caller cannot act on."""
        return self.code in INTERNAL_ERROR_CODES


INVALID_CREDENTIALS = SessionError(
    code=ErrorCode.INVALID_CREDENTIALS,
    message="Invalid email or password",
)
INVALID_REFRESH_TOKEN = SessionError(
    code=ErrorCode.INVALID_REFRESH_TOKEN,
    message="Invalid or expired refresh token",
)
RATE_LIMITED = SessionError(
    code=ErrorCode.RATE_LIMITED,
    message="Too many login attempts, try again later",
)
USER_NOT_FOUND = SessionError(
    code=ErrorCode.USER_NOT_FOUND,
    message="User not found",
)
CAPTCHA_INVALID = SessionError(
    code=ErrorCode.CAPTCHA_INVALID,
    message="CAPTCHA verification failed",
)

_INTERNAL_MESSAGES = {
    ErrorCode.HASHING_FAILED: "Internal error",
    ErrorCode.SIGNING_FAILED: "Internal error",
    ErrorCode.STORAGE_UNAVAILABLE: "Service temporarily unavailable",
    ErrorCode.REQUEST_TIMEOUT: "Request timed out",
}


def internal_error(code: ErrorCode, cause: BaseException | None = None) -> SessionError:
    """Build an opaque internal fault.

    Args:
        code: One of the internal error codes.
        cause: Underlying exception, kept for logging only.

    Raises:
        ValueError: If code is not an internal code.
    """
    if code not in INTERNAL_ERROR_CODES:
        raise ValueError(f"{code.value} is not an internal error code")
    return SessionError(code=code, message=_INTERNAL_MESSAGES[code], cause=cause)
