"""CAPTCHA verifier protocol.

Provider verification is outside this package; the engine only consumes a
boolean answer.
"""

from typing import Protocol


class CaptchaVerifierProtocol(Protocol):
    """CAPTCHA verification port."""

    def is_enabled(self) -> bool:
        """Whether login requires a CAPTCHA token."""
        ...

    async def verify(self, token: str) -> bool:
        """Return True if the token proves a human solved the challenge."""
        ...
