"""IdentityService tests against mocked collaborators.

These cover the store signals the in-memory adapters cannot easily be made
to produce: a uniqueness violation that slips past the existence check, and
a token deleted by a concurrent caller between lookup and consumption.
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, Mock

import pytest

from credentia.core.exceptions import (
    AccountNotFoundError,
    DatabaseError,
    DuplicateAccountError,
    IdentityErrorKind,
)
from credentia.domain.entities.account import Account
from credentia.domain.entities.verification_token import VerificationToken
from credentia.domain.interfaces import IPasswordHasher, ITokenGenerator
from credentia.domain.results import Failure, Success
from credentia.domain.services.identity import IdentityService

NOW = datetime(2025, 6, 1, 9, 0, 0, tzinfo=timezone.utc)


def _service(accounts=None, tokens=None, hasher=None, generator=None):
    if hasher is None:
        hasher = Mock(spec=IPasswordHasher)
        hasher.hash.return_value = "$2b$04$" + "x" * 53
        hasher.verify.return_value = True
    if generator is None:
        generator = Mock(spec=ITokenGenerator)
        generator.now.return_value = NOW
        generator.generate_token.return_value = "a" * 64
        generator.compute_expiry.return_value = NOW + timedelta(hours=24)
        generator.is_expired.return_value = False
    return IdentityService(
        account_repository=accounts or AsyncMock(),
        token_repository=tokens or AsyncMock(),
        password_hasher=hasher,
        token_generator=generator,
    )


def _account(**overrides) -> Account:
    values = dict(
        id="acc1",
        email="a@example.com",
        display_name="Alice",
        credential_hash="$2b$04$" + "x" * 53,
        email_verified_at=None,
        created_at=NOW,
        updated_at=NOW,
    )
    values.update(overrides)
    return Account(**values)


@pytest.mark.asyncio
async def test_register_maps_store_uniqueness_violation_to_conflict():
    accounts = AsyncMock()
    accounts.exists_by_email.return_value = False
    accounts.create.side_effect = DuplicateAccountError()
    tokens = AsyncMock()
    service = _service(accounts=accounts, tokens=tokens)

    result = await service.register("a@example.com", "Alice", "Sup3r$ecret")

    assert result == Failure(IdentityErrorKind.ACCOUNT_CONFLICT)
    tokens.create.assert_not_called()


@pytest.mark.asyncio
async def test_register_skips_hashing_when_email_taken():
    accounts = AsyncMock()
    accounts.exists_by_email.return_value = True
    service = _service(accounts=accounts)

    result = await service.register("A@example.com", "Alice", "Sup3r$ecret")

    assert result.kind is IdentityErrorKind.ACCOUNT_CONFLICT
    accounts.exists_by_email.assert_awaited_once_with("a@example.com")
    service._hasher.hash.assert_not_called()
    accounts.create.assert_not_called()


@pytest.mark.asyncio
async def test_register_issues_token_with_default_lifetime():
    accounts = AsyncMock()
    accounts.exists_by_email.return_value = False
    accounts.create.side_effect = lambda account: account
    tokens = AsyncMock()
    service = _service(accounts=accounts, tokens=tokens)

    result = await service.register("a@example.com", "Alice", "Sup3r$ecret")

    assert isinstance(result, Success)
    assert result.value.verification_token == "a" * 64
    service._token_generator.compute_expiry.assert_called_once_with(None)
    tokens.create.assert_awaited_once_with(
        identifier="a@example.com",
        token="a" * 64,
        expires_at=NOW + timedelta(hours=24),
    )
    assert [c[0] for c in tokens.method_calls] == ["delete_all_for_identifier", "create"]
    tokens.delete_all_for_identifier.assert_awaited_once_with("a@example.com")


@pytest.mark.asyncio
async def test_verify_email_loses_race_to_concurrent_consumer():
    tokens = AsyncMock()
    tokens.find_by_token.return_value = VerificationToken(
        identifier="a@example.com", token="b" * 64, expires_at=NOW + timedelta(hours=1)
    )
    tokens.delete_by_token.return_value = False
    accounts = AsyncMock()
    accounts.find_by_email.return_value = _account()
    service = _service(accounts=accounts, tokens=tokens)

    result = await service.verify_email("b" * 64)

    assert result == Failure(IdentityErrorKind.INVALID_OR_EXPIRED_TOKEN)
    accounts.mark_email_verified.assert_not_called()


@pytest.mark.asyncio
async def test_verify_email_consumes_token_before_marking_account():
    calls = []
    tokens = AsyncMock()
    tokens.find_by_token.return_value = VerificationToken(
        identifier="a@example.com", token="b" * 64, expires_at=NOW + timedelta(hours=1)
    )

    async def _delete(token):
        calls.append("delete")
        return True

    async def _mark(account_id, verified_at):
        calls.append("mark")
        return _account(email_verified_at=verified_at)

    tokens.delete_by_token.side_effect = _delete
    accounts = AsyncMock()
    accounts.find_by_email.return_value = _account()
    accounts.mark_email_verified.side_effect = _mark
    service = _service(accounts=accounts, tokens=tokens)

    result = await service.verify_email("b" * 64)

    assert calls == ["delete", "mark"]
    assert result.value.email_verified_at == NOW


@pytest.mark.asyncio
async def test_verify_email_account_removed_before_marking():
    tokens = AsyncMock()
    tokens.find_by_token.return_value = VerificationToken(
        identifier="a@example.com", token="d" * 64, expires_at=NOW + timedelta(hours=1)
    )
    tokens.delete_by_token.return_value = True
    accounts = AsyncMock()
    accounts.find_by_email.return_value = _account()
    accounts.mark_email_verified.side_effect = AccountNotFoundError()
    service = _service(accounts=accounts, tokens=tokens)

    result = await service.verify_email("d" * 64)

    assert result == Failure(IdentityErrorKind.ACCOUNT_NOT_FOUND)
    accounts.mark_email_verified.assert_awaited_once_with("acc1", NOW)


@pytest.mark.asyncio
async def test_verify_email_expired_token_deleted_without_account_lookup():
    tokens = AsyncMock()
    tokens.find_by_token.return_value = VerificationToken(
        identifier="a@example.com", token="c" * 64, expires_at=NOW - timedelta(seconds=1)
    )
    accounts = AsyncMock()
    service = _service(accounts=accounts, tokens=tokens)
    service._token_generator.is_expired.return_value = True

    result = await service.verify_email("c" * 64)

    assert result == Failure(IdentityErrorKind.INVALID_OR_EXPIRED_TOKEN)
    tokens.delete_by_token.assert_awaited_once_with("c" * 64)
    accounts.find_by_email.assert_not_called()


@pytest.mark.asyncio
async def test_login_unknown_email_still_spends_a_verification():
    accounts = AsyncMock()
    accounts.find_by_email.return_value = None
    service = _service(accounts=accounts)

    result = await service.login("nobody@example.com", "whatever")

    assert result == Failure(IdentityErrorKind.INVALID_CREDENTIALS)
    service._hasher.dummy_verify.assert_called_once_with()
    service._hasher.verify.assert_not_called()


@pytest.mark.asyncio
async def test_resend_does_not_touch_tokens_when_verified():
    accounts = AsyncMock()
    accounts.find_by_email.return_value = _account(email_verified_at=NOW)
    tokens = AsyncMock()
    service = _service(accounts=accounts, tokens=tokens)

    result = await service.resend_verification("a@example.com")

    assert result == Failure(IdentityErrorKind.ALREADY_VERIFIED)
    tokens.delete_all_for_identifier.assert_not_called()
    tokens.create.assert_not_called()


@pytest.mark.asyncio
async def test_resend_deletes_before_creating():
    manager = AsyncMock()
    accounts = AsyncMock()
    accounts.find_by_email.return_value = _account()
    manager.delete_all_for_identifier.return_value = 2
    service = _service(accounts=accounts, tokens=manager)

    result = await service.resend_verification("a@example.com")

    assert result == Success("a" * 64)
    assert [c[0] for c in manager.method_calls] == ["delete_all_for_identifier", "create"]


@pytest.mark.asyncio
async def test_store_failures_propagate_unchanged():
    accounts = AsyncMock()
    accounts.find_by_email.side_effect = DatabaseError("connection refused")
    service = _service(accounts=accounts)

    with pytest.raises(DatabaseError):
        await service.login("a@example.com", "Sup3r$ecret")
    assert accounts.find_by_email.await_count == 1


@pytest.mark.asyncio
async def test_purge_uses_generator_clock():
    tokens = AsyncMock()
    tokens.delete_all_expired.return_value = 3
    service = _service(tokens=tokens)

    assert await service.purge_expired_tokens() == 3
    tokens.delete_all_expired.assert_awaited_once_with(NOW)
