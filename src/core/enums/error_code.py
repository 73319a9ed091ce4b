"""Domain-level error codes (machine-readable).

Error codes follow ENTITY_ACTION_REASON naming convention.
Used with Result types for railway-oriented programming.

Categories:
- Validation errors (INVALID_*, EMPTY_*)
- Authentication errors (INVALID_CREDENTIALS, *_TOKEN_*)
- Token primitive errors (TOKEN_*, SIGNING_*, SECRET_*)
- Password hashing errors (HASHING_*, VERIFICATION_*)
- Resource and conflict errors (*_NOT_FOUND, *_ALREADY_EXISTS)
- Abuse prevention (RATE_LIMITED, CAPTCHA_INVALID)
- Infrastructure faults (STORAGE_UNAVAILABLE, REQUEST_TIMEOUT)
"""

from enum import Enum


class ErrorCode(Enum):
    """Domain-level error codes (machine-readable).

    Error codes follow ENTITY_ACTION_REASON naming convention.
    """

    # Validation errors
    INVALID_CREDENTIALS_FORMAT = "invalid_credentials_format"
    EMPTY_INPUT = "empty_input"

    # Authentication errors (caller-visible)
    INVALID_CREDENTIALS = "invalid_credentials"
    INVALID_REFRESH_TOKEN = "invalid_refresh_token"
    ACCESS_TOKEN_INVALID = "access_token_invalid"
    ACCESS_TOKEN_EXPIRED = "access_token_expired"

    # Token primitive errors
    TOKEN_INVALID_SIGNATURE = "token_invalid_signature"
    TOKEN_EXPIRED = "token_expired"
    TOKEN_MALFORMED = "token_malformed"
    SIGNING_FAILED = "signing_failed"
    SECRET_GENERATION_FAILED = "secret_generation_failed"

    # Password hashing errors
    HASHING_FAILED = "hashing_failed"
    VERIFICATION_FAILED = "verification_failed"

    # Resource errors
    USER_NOT_FOUND = "user_not_found"
    REFRESH_TOKEN_NOT_FOUND = "refresh_token_not_found"

    # Conflict errors
    REFRESH_TOKEN_ALREADY_EXISTS = "refresh_token_already_exists"

    # Abuse prevention
    RATE_LIMITED = "rate_limited"
    CAPTCHA_INVALID = "captcha_invalid"

    # Infrastructure faults
    STORAGE_UNAVAILABLE = "storage_unavailable"
    REQUEST_TIMEOUT = "request_timeout"
