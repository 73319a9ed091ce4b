"""Application services.

Usage:
    from src.application.services import CaptchaGatedLogin, SessionService
"""

from src.application.services.captcha_gate import CaptchaGatedLogin
from src.application.services.session_service import SessionService

__all__ = [
    "CaptchaGatedLogin",
    "SessionService",
]
