"""User lookup error types."""

from dataclasses import dataclass

from src.core.errors import DomainError


@dataclass(frozen=True, slots=True, kw_only=True)
class UserLookupError(DomainError):
    """User lookup failure.

    Codes:
        USER_NOT_FOUND: No user with that email or ID.
        STORAGE_UNAVAILABLE: Backend failure.
    """

    pass  # Inherits all fields from DomainError
