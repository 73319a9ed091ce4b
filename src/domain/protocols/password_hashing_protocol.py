"""Password hashing protocol for domain layer.

This protocol defines the interface for password hashing and verification.
Infrastructure layer provides concrete implementations (bcrypt).

Architecture:
    - Domain defines protocol (port)
    - Infrastructure implements adapter (BcryptPasswordService)
    - No framework dependencies in domain
"""

from typing import Protocol

from src.core.result import Result
from src.domain.errors import PasswordHashingError


class PasswordHashingProtocol(Protocol):
    """Password hashing and verification interface.

    Implementations are pure and CPU-bound; async callers run them in a
    worker thread (``asyncio.to_thread``).

    Usage:
        match password_service.verify_password(password, user.password_hash):
            case Success(value=True):
                ...  # authenticated
            case Success(value=False):
                ...  # wrong password
            case Failure(error=error):
                ...  # malformed digest
    """

    def hash_password(self, password: str) -> Result[str, PasswordHashingError]:
        """Hash a plaintext password.

        Args:
            password: Plaintext password to hash.

        Returns:
            Success(digest) in bcrypt format ($2b$<cost>$...), or Failure with
            EMPTY_INPUT / HASHING_FAILED.
        """
        ...

    def verify_password(
        self, password: str, password_hash: str
    ) -> Result[bool, PasswordHashingError]:
        """Verify a plaintext password against a digest.

        Args:
            password: Plaintext password to verify.
            password_hash: Digest from the user record.

        Returns:
            Success(True) on match, Success(False) on mismatch, Failure with
            EMPTY_INPUT or VERIFICATION_FAILED (malformed digest) otherwise.
        """
        ...
