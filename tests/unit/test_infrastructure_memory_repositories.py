"""Unit tests for the in-memory user and refresh token repositories.

Tests cover:
- User lookup by id and case-insensitive email
- Refresh token create / find / revoke / revoke-all contract
- Idempotent revoke vs NOT_FOUND for an unknown digest
- Concurrent revokes: exactly one caller claims the token
- Returned records are copies
"""

import asyncio
from datetime import timedelta

import pytest
from uuid_extensions import uuid7

from src.core.enums import ErrorCode
from src.core.result import Failure, Success
from src.domain.entities import RefreshToken
from src.domain.enums import RevocationReason
from src.infrastructure.persistence.memory import (
    InMemoryRefreshTokenRepository,
    InMemoryUserRepository,
)
from tests.utils.fakes import T0, FakeClock, make_user


def create_token(user_id=None, token_hash=None) -> RefreshToken:
    return RefreshToken(
        id=uuid7(),
        user_id=user_id or uuid7(),
        token_hash=token_hash or uuid7().hex,
        expires_at=T0 + timedelta(days=7),
        created_at=T0,
    )


@pytest.mark.unit
class TestInMemoryUserRepository:
    """Test user lookups."""

    async def test_find_by_email_is_case_insensitive(self):
        user = make_user(email="Alice@Example.com")
        repo = InMemoryUserRepository([user])

        result = await repo.find_by_email("  ALICE@example.COM")

        assert isinstance(result, Success)
        assert result.value.id == user.id
        assert result.value.email == "alice@example.com"

    async def test_find_by_id(self):
        user = make_user()
        repo = InMemoryUserRepository([user])

        result = await repo.find_by_id(user.id)

        assert isinstance(result, Success)
        assert result.value.email == user.email

    async def test_unknown_user_is_not_found(self):
        repo = InMemoryUserRepository()

        by_email = await repo.find_by_email("ghost@example.com")
        by_id = await repo.find_by_id(uuid7())

        assert isinstance(by_email, Failure)
        assert by_email.error.code is ErrorCode.USER_NOT_FOUND
        assert isinstance(by_id, Failure)
        assert by_id.error.code is ErrorCode.USER_NOT_FOUND


@pytest.mark.unit
class TestInMemoryRefreshTokenRepository:
    """Test the refresh token ledger contract."""

    async def test_create_then_find(self):
        repo = InMemoryRefreshTokenRepository()
        token = create_token()

        await repo.create(token)
        result = await repo.find_by_hash(token.token_hash)

        assert isinstance(result, Success)
        assert result.value.id == token.id

    async def test_duplicate_hash_is_already_exists(self):
        repo = InMemoryRefreshTokenRepository()
        await repo.create(create_token(token_hash="dup"))

        result = await repo.create(create_token(token_hash="dup"))

        assert isinstance(result, Failure)
        assert result.error.code is ErrorCode.REFRESH_TOKEN_ALREADY_EXISTS

    async def test_unknown_hash_is_not_found(self):
        repo = InMemoryRefreshTokenRepository()

        result = await repo.find_by_hash("missing")

        assert isinstance(result, Failure)
        assert result.error.code is ErrorCode.REFRESH_TOKEN_NOT_FOUND

    async def test_find_returns_revoked_and_expired_records(self):
        """The store does not judge usability."""
        clock = FakeClock()
        repo = InMemoryRefreshTokenRepository(clock=clock)
        token = create_token()
        await repo.create(token)
        await repo.revoke(token.token_hash, reason=RevocationReason.LOGOUT)

        result = await repo.find_by_hash(token.token_hash)

        assert isinstance(result, Success)
        assert result.value.revoked_at == T0
        assert result.value.revoked_reason is RevocationReason.LOGOUT

    async def test_revoke_is_idempotent(self):
        repo = InMemoryRefreshTokenRepository()
        token = create_token()
        await repo.create(token)

        first = await repo.revoke(token.token_hash, reason=RevocationReason.LOGOUT)
        second = await repo.revoke(token.token_hash, reason=RevocationReason.LOGOUT)

        assert first == Success(value=True)
        assert second == Success(value=False)

    async def test_revoke_unknown_hash_is_not_found(self):
        repo = InMemoryRefreshTokenRepository()

        result = await repo.revoke("never-issued", reason=RevocationReason.LOGOUT)

        assert isinstance(result, Failure)
        assert result.error.code is ErrorCode.REFRESH_TOKEN_NOT_FOUND

    async def test_concurrent_revokes_have_one_winner(self):
        repo = InMemoryRefreshTokenRepository()
        token = create_token()
        await repo.create(token)

        results = await asyncio.gather(
            *(
                repo.revoke(token.token_hash, reason=RevocationReason.ROTATED)
                for _ in range(20)
            )
        )

        assert [r.value for r in results].count(True) == 1

    async def test_revoke_all_for_user_only_touches_live_tokens_of_user(self):
        repo = InMemoryRefreshTokenRepository()
        owner = uuid7()
        live = [create_token(user_id=owner) for _ in range(3)]
        already = create_token(user_id=owner)
        other = create_token()
        for token in [*live, already, other]:
            await repo.create(token)
        await repo.revoke(already.token_hash, reason=RevocationReason.LOGOUT)

        result = await repo.revoke_all_for_user(
            owner, reason=RevocationReason.LOGOUT_ALL
        )

        assert result == Success(value=3)
        other_after = await repo.find_by_hash(other.token_hash)
        already_after = await repo.find_by_hash(already.token_hash)
        assert other_after.value.revoked_at is None
        assert already_after.value.revoked_reason is RevocationReason.LOGOUT

    async def test_revoke_all_for_unknown_user_is_zero(self):
        repo = InMemoryRefreshTokenRepository()

        result = await repo.revoke_all_for_user(
            uuid7(), reason=RevocationReason.LOGOUT_ALL
        )

        assert result == Success(value=0)

    async def test_returned_records_are_copies(self):
        repo = InMemoryRefreshTokenRepository()
        token = create_token()
        await repo.create(token)

        found = (await repo.find_by_hash(token.token_hash)).value
        found.revoke(RevocationReason.LOGOUT)

        again = (await repo.find_by_hash(token.token_hash)).value
        assert again.revoked_at is None
