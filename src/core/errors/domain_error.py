"""Base domain error class for railway-oriented programming.

DomainError is the base class for every error value in the package.
Errors flow through the system as data (Result types), not exceptions, and
are discriminated by ``code`` (an ErrorCode), never by identity.

Architecture:
- Base class for all error types (core, domain, application)
- Does NOT inherit from Exception (not raised, returned in Result)
- Uses dataclass inheritance (NOT Protocol/ABC)
- ``cause`` carries the underlying exception for logs only; it takes no
  part in equality and is never rendered to callers

Usage:
    from src.core.errors import DomainError
    from src.core.enums import ErrorCode

    @dataclass(frozen=True, slots=True, kw_only=True)
    class MyError(DomainError):
        pass  # Inherits code, message, details, cause
"""

from dataclasses import dataclass, field

from src.core.enums import ErrorCode


@dataclass(frozen=True, slots=True, kw_only=True)
class DomainError:
    """Base domain error (does NOT inherit from Exception).

    Attributes:
        code: Machine-readable error code (enum).
        message: Human-readable error message.
        details: Optional context for debugging.
        cause: Optional underlying exception (logging only).
    """

    code: ErrorCode
    message: str
    details: dict[str, str] | None = None
    cause: BaseException | None = field(default=None, compare=False, repr=False)

    def __str__(self) -> str:
        """String representation of error."""
        return f"{self.code.value}: {self.message}"
