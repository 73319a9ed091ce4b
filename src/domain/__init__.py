"""Domain layer - Pure business logic.

This layer contains the core business entities, value objects, errors and
protocols (ports). The domain layer has NO dependencies on any framework or
infrastructure, apart from email-validator inside the Credentials value
object.

Structure:
- entities/: Domain entities (mutable, have identity)
- value_objects/: Value objects (immutable or per-key records, no identity)
- enums/: Status and reason enumerations
- errors/: Error values returned inside Result types
- protocols/: Ports (repository and service interfaces)

The domain layer defines WHAT the session engine does, not HOW it's stored.
"""
