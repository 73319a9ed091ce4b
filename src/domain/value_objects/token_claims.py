"""Access token claims value object.

Claims embedded in a signed access token. They are derived from the user
record at issuance time and never persisted.
"""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True, slots=True, kw_only=True)
class TokenClaims:
    """Identity carried by an access token.

    Attributes:
        user_id: Subject of the token.
        email: User email at issuance time.
        role: User role at issuance time.
    """

    user_id: UUID
    email: str
    role: str
