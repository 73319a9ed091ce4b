"""Login credentials value object.

Immutable pair of a normalized email and a plaintext password. The password
lives only for the duration of one login attempt: it is never persisted,
never logged and never part of ``repr``.
"""

from dataclasses import dataclass, field

from email_validator import EmailNotValidError, validate_email

MIN_PASSWORD_LENGTH = 8
# bcrypt only consumes the first 72 bytes of its input
MAX_PASSWORD_BYTES = 72


@dataclass(frozen=True)
class Credentials:
    """Validated login credentials.

    Attributes:
        email: Email address, trimmed and lowercased.
        password: Plaintext password (excluded from repr).

    Raises:
        ValueError: If the email is malformed or the password length is
            out of range.

    Example:
        >>> creds = Credentials(email="  Alice@Example.COM ", password="s3cret-pass")
        >>> creds.email
        'alice@example.com'
        >>> Credentials(email="alice@example.com", password="short")
        Traceback (most recent call last):
        ...
        ValueError: Password must be at least 8 characters
    """

    email: str
    password: str = field(repr=False)

    def __post_init__(self) -> None:
        """Normalize the email and enforce password bounds.

        Raises:
            ValueError: If either field is invalid.
        """
        candidate = self.email.strip().lower()
        try:
            validated = validate_email(candidate, check_deliverability=False)
        except EmailNotValidError as e:
            raise ValueError(f"Invalid email: {e}") from e
        # Use object.__setattr__ because dataclass is frozen
        object.__setattr__(self, "email", validated.normalized)

        if len(self.password) < MIN_PASSWORD_LENGTH:
            raise ValueError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
            )
        if len(self.password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(
                f"Password must be at most {MAX_PASSWORD_BYTES} bytes when UTF-8 encoded"
            )
