"""No-op CAPTCHA verifier.

Used when CAPTCHA_ENABLED is false or no provider is integrated. When
disabled the gate is skipped entirely; when constructed as enabled it still
accepts every non-empty token (the container logs captcha_provider_missing
when wiring it that way), which keeps local setups usable while the
login form already sends a token field.
"""


class NoopCaptchaVerifier:
    """CaptchaVerifierProtocol implementation without a provider.

    Args:
        enabled: Value reported by is_enabled().
    """

    def __init__(self, *, enabled: bool = False) -> None:
        self._enabled = enabled

    def is_enabled(self) -> bool:
        return self._enabled

    async def verify(self, token: str) -> bool:
        return bool(token)
