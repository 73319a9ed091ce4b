"""Data Transfer Objects (DTOs) for application layer.

Usage:
    from src.application.dtos import LoginResponse, RequestContext, UserProfile
"""

from src.application.dtos.auth_dtos import LoginResponse, RefreshResponse, UserProfile
from src.application.dtos.request_context import RequestContext

__all__ = [
    "LoginResponse",
    "RefreshResponse",
    "RequestContext",
    "UserProfile",
]
