"""Infrastructure layer - Adapters and external integrations.

This layer contains implementations of domain protocols (ports):
- security/: bcrypt, JWT, refresh secret digests
- persistence/: SQLAlchemy and in-memory stores for users and refresh tokens
- rate_limit/: Fixed-window limiter over in-memory or Redis storage
- logging/: structlog console adapter
- captcha/: CAPTCHA verifier adapters

The infrastructure layer depends on the domain layer (implements protocols)
but the domain layer does NOT depend on infrastructure.
"""
