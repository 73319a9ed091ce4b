"""Application layer - Use cases and orchestration.

This layer contains the session use cases following the CQRS pattern:
- Commands: Write operations that change session state
- Queries: Read operations that fetch data
- Services: SessionService executing them, CaptchaGatedLogin in front of login

Structure:
- commands/: Command dataclasses (login, refresh, logout)
- queries/: Query dataclasses (current user)
- dtos/: Response DTOs and the per-request context
- services/: Orchestration over domain protocols

The application layer orchestrates domain logic but contains no business rules.
"""
