"""Rate limit error types.

Used when rate limiting storage fails (Redis errors, Lua script failures).

Usage:
    from src.domain.errors import RateLimitError
    from src.core.enums import ErrorCode
    from src.core.result import Failure

    return Failure(error=RateLimitError(
        code=ErrorCode.STORAGE_UNAVAILABLE,
        message="Rate limit storage unavailable",
    ))
"""

from dataclasses import dataclass

from src.core.errors import DomainError


@dataclass(frozen=True, slots=True, kw_only=True)
class RateLimitError(DomainError):
    """Rate limit system failure.

    Note that rate limit DENIED is NOT an error - it's a successful
    operation that returns False. This error class is for actual system
    failures.

    Design:
        The login flow fails closed: any RateLimitError aborts the login
        with STORAGE_UNAVAILABLE instead of letting the attempt through
        uncounted.
    """

    pass  # Inherits all fields from DomainError
