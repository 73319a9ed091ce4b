"""CAPTCHA verifier adapters."""

from src.infrastructure.captcha.noop_adapter import NoopCaptchaVerifier

__all__ = ["NoopCaptchaVerifier"]
