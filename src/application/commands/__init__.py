"""Application commands (CQRS write operations)."""

from src.application.commands.auth_commands import (
    LoginUser,
    LogoutUser,
    RefreshAccessToken,
)

__all__ = [
    "LoginUser",
    "LogoutUser",
    "RefreshAccessToken",
]
