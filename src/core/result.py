"""Result types for railway-oriented programming.

Every port in this package reports failure as a value instead of raising.
Callers branch on the variant with structural pattern matching.

Usage:
    def check_limit(key: str) -> Result[bool, RateLimitError]:
        if storage_down:
            return Failure(error=RateLimitError(...))
        return Success(value=True)

    match check_limit("login:203.0.113.7"):
        case Success(value=allowed):
            ...
        case Failure(error=error):
            logger.warning("Rate limiter unavailable", error_code=error.code.value)
"""

from dataclasses import dataclass
from typing import Generic, TypeAlias, TypeVar

T = TypeVar("T")  # Success type
E = TypeVar("E")  # Error type


@dataclass(frozen=True, slots=True, kw_only=True)
class Success(Generic[T]):
    """Represents a successful operation result.

    Attributes:
        value: The successful result value.
    """

    value: T


@dataclass(frozen=True, slots=True, kw_only=True)
class Failure(Generic[E]):
    """Represents a failed operation result.

    Attributes:
        error: The error that occurred.
    """

    error: E


# Type alias for Result union
Result: TypeAlias = Success[T] | Failure[E]
