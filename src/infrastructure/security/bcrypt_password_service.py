"""Bcrypt password hashing service (adapter).

This service implements the PasswordHashingProtocol using bcrypt.

Architecture:
    - Implements PasswordHashingProtocol (no inheritance required)
    - Structural typing via Protocol
    - Injected via dependency container

Security:
    - Bcrypt with configurable cost factor (default 12, ~250ms per hash)
    - Constant-time comparison inside bcrypt.checkpw
    - Malformed digests are reported, not silently treated as mismatches

Performance:
    - Hash and verify are CPU-bound; async callers use asyncio.to_thread
"""

import re

import bcrypt

from src.core.enums import ErrorCode
from src.core.result import Failure, Result, Success
from src.domain.errors import PasswordHashingError

# Modular crypt format: $2a$/$2b$/$2y$, two-digit cost, 53 chars of salt+hash
_BCRYPT_DIGEST = re.compile(r"^\$2[aby]\$\d{2}\$[./A-Za-z0-9]{53}$")


class BcryptPasswordService:
    """Bcrypt password hashing service.

    Usage:
        from src.core.container import get_password_service

        password_service = get_password_service()

        match password_service.hash_password("SecurePass123!"):
            case Success(value=digest):
                ...

        result = password_service.verify_password("SecurePass123!", digest)
    """

    def __init__(self, cost_factor: int = 12) -> None:
        """Initialize bcrypt password service.

        Args:
            cost_factor: Bcrypt cost factor (default: 12).
                Cost factor is logarithmic: each +1 doubles computation time.
                Tests use 4 (the bcrypt minimum).

        Raises:
            ValueError: If cost_factor is outside bcrypt's 4..31 range.
        """
        if not 4 <= cost_factor <= 31:
            msg = "Cost factor must be between 4 and 31"
            raise ValueError(msg)

        self._cost_factor = cost_factor

    @property
    def cost_factor(self) -> int:
        """Work factor applied to new digests."""
        return self._cost_factor

    def hash_password(self, password: str) -> Result[str, PasswordHashingError]:
        """Hash a plaintext password using bcrypt.

        Args:
            password: Plaintext password to hash.

        Returns:
            Success with a 60 character digest ($2b$<cost>$<salt><hash>), or
            Failure(EMPTY_INPUT / HASHING_FAILED).

        Example:
            >>> service = BcryptPasswordService(cost_factor=4)
            >>> first = service.hash_password("SecurePass123!").value
            >>> second = service.hash_password("SecurePass123!").value
            >>> first != second  # Different salts
            True
        """
        if not password:
            return Failure(
                error=PasswordHashingError(
                    code=ErrorCode.EMPTY_INPUT,
                    message="Password must not be empty",
                )
            )

        try:
            salt = bcrypt.gensalt(rounds=self._cost_factor)
            password_hash = bcrypt.hashpw(password.encode("utf-8"), salt)
        except ValueError as exc:
            # bcrypt >= 5 rejects inputs longer than 72 bytes
            return Failure(
                error=PasswordHashingError(
                    code=ErrorCode.HASHING_FAILED,
                    message="Password hashing failed",
                    cause=exc,
                )
            )

        return Success(value=password_hash.decode("utf-8"))

    def verify_password(
        self, password: str, password_hash: str
    ) -> Result[bool, PasswordHashingError]:
        """Verify a plaintext password against a bcrypt digest.

        Args:
            password: Plaintext password to verify.
            password_hash: Digest from the user record.

        Returns:
            Success(True/False) for a well-formed digest, Failure(EMPTY_INPUT)
            for empty arguments, Failure(VERIFICATION_FAILED) for a malformed
            digest.

        Example:
            >>> service = BcryptPasswordService(cost_factor=4)
            >>> digest = service.hash_password("SecurePass123!").value
            >>> service.verify_password("WrongPassword", digest)
            Success(value=False)
        """
        if not password or not password_hash:
            return Failure(
                error=PasswordHashingError(
                    code=ErrorCode.EMPTY_INPUT,
                    message="Password and digest must not be empty",
                )
            )

        if not _BCRYPT_DIGEST.match(password_hash):
            return Failure(
                error=PasswordHashingError(
                    code=ErrorCode.VERIFICATION_FAILED,
                    message="Stored password digest is malformed",
                )
            )

        try:
            # bcrypt.checkpw does constant-time comparison
            matches = bcrypt.checkpw(
                password.encode("utf-8"), password_hash.encode("utf-8")
            )
        except ValueError as exc:
            return Failure(
                error=PasswordHashingError(
                    code=ErrorCode.VERIFICATION_FAILED,
                    message="Stored password digest is malformed",
                    cause=exc,
                )
            )

        return Success(value=matches)
