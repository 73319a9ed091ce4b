"""CAPTCHA gate in front of login.

The session service is agnostic to whether a CAPTCHA ran. This wrapper
checks the token first; a failed challenge returns CAPTCHA_INVALID without
consulting the rate limiter or the user store.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from src.core.result import Failure, Result
from src.domain.errors.session_error import CAPTCHA_INVALID

if TYPE_CHECKING:
    from src.application.commands.auth_commands import LoginUser
    from src.application.dtos.auth_dtos import LoginResponse
    from src.application.dtos.request_context import RequestContext
    from src.application.services.session_service import SessionService
    from src.domain.errors import SessionError
    from src.domain.protocols import CaptchaVerifierProtocol, LoggerProtocol


class CaptchaGatedLogin:
    """Login entry point that requires a solved CAPTCHA when enabled.

    Usage:
        gated = CaptchaGatedLogin(
            session_service=get_session_service(),
            captcha_verifier=get_captcha_verifier(),
            logger=get_logger(),
        )
        result = await gated.login(command, captcha_token=form.captcha_token)
    """

    def __init__(
        self,
        *,
        session_service: SessionService,
        captcha_verifier: CaptchaVerifierProtocol,
        logger: LoggerProtocol,
    ) -> None:
        self._session_service = session_service
        self._captcha_verifier = captcha_verifier
        self._logger = logger

    async def login(
        self,
        command: LoginUser,
        ctx: RequestContext | None = None,
        *,
        captcha_token: str | None = None,
    ) -> Result[LoginResponse, SessionError]:
        """Verify the CAPTCHA token (when enabled), then log in.

        Returns:
            Failure(CAPTCHA_INVALID) for a missing or rejected token, otherwise
            whatever SessionService.login returns.
        """
        if self._captcha_verifier.is_enabled():
            if not captcha_token or not await self._captcha_verifier.verify(
                captcha_token
            ):
                self._logger.info(
                    "login_captcha_rejected", key=command.rate_limit_key
                )
                return Failure(error=CAPTCHA_INVALID)
        return await self._session_service.login(command, ctx)
