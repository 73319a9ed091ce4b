"""Test suite for session-guard.

- unit/: Component tests with in-memory adapters, fakes and mocks
- utils/: Shared builders (FakeClock, make_user, make_logger)
"""
