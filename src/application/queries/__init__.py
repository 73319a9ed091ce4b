"""Application queries (CQRS read operations)."""

from src.application.queries.auth_queries import GetCurrentUser

__all__ = ["GetCurrentUser"]
