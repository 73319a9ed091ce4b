"""Session queries (CQRS read operations).

Queries NEVER change state.
"""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True, kw_only=True)
class GetCurrentUser:
    """Get the public profile of the authenticated user.

    Attributes:
        user_id: Subject of the validated access token.

    Example:
        >>> query = GetCurrentUser(user_id=claims.user_id)
        >>> result = await session_service.me(query)
    """

    user_id: UUID
