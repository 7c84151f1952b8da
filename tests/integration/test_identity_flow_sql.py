"""End-to-end identity lifecycle over the SQL stores."""

import pytest

from credentia.core.exceptions import IdentityErrorKind
from credentia.domain.results import Failure, Success
from credentia.infrastructure.dependency_injection.identity_dependencies import (
    build_identity_service,
)
from credentia.infrastructure.repositories import AccountRepository, VerificationTokenRepository


@pytest.fixture
def sql_identity_service(async_session, password_hasher, clock):
    return build_identity_service(async_session, password_hasher=password_hasher, clock=clock)


@pytest.mark.asyncio
async def test_builder_selects_sql_stores(sql_identity_service):
    assert isinstance(sql_identity_service._accounts, AccountRepository)
    assert isinstance(sql_identity_service._tokens, VerificationTokenRepository)


@pytest.mark.asyncio
async def test_register_verify_login(sql_identity_service):
    registered = await sql_identity_service.register("Alice@Example.com", "Alice", "Sup3r$ecret")
    assert isinstance(registered, Success)
    token = registered.value.verification_token

    assert await sql_identity_service.login("alice@example.com", "Sup3r$ecret") == Failure(
        IdentityErrorKind.EMAIL_NOT_VERIFIED
    )

    verified = await sql_identity_service.verify_email(token)
    assert isinstance(verified, Success)
    assert verified.value.is_verified

    assert await sql_identity_service.verify_email(token) == Failure(
        IdentityErrorKind.INVALID_OR_EXPIRED_TOKEN
    )

    login = await sql_identity_service.login("ALICE@example.com", "Sup3r$ecret")
    assert isinstance(login, Success)
    assert login.value.id == registered.value.account.id
    assert "credential_hash" not in login.value.model_dump()


@pytest.mark.asyncio
async def test_duplicate_registration_conflicts(sql_identity_service):
    await sql_identity_service.register("a@example.com", "Alice", "Sup3r$ecret")

    result = await sql_identity_service.register("A@EXAMPLE.COM", "Other", "An0ther$ecret")

    assert result == Failure(IdentityErrorKind.ACCOUNT_CONFLICT)


@pytest.mark.asyncio
async def test_expired_token_and_resend(sql_identity_service, clock):
    registered = await sql_identity_service.register("a@example.com", "Alice", "Sup3r$ecret")
    clock.advance(hours=25)

    expired = await sql_identity_service.verify_email(registered.value.verification_token)
    assert expired == Failure(IdentityErrorKind.INVALID_OR_EXPIRED_TOKEN)

    resent = await sql_identity_service.resend_verification("a@example.com")
    assert isinstance(resent, Success)
    assert isinstance(await sql_identity_service.verify_email(resent.value), Success)
    assert await sql_identity_service.resend_verification("a@example.com") == Failure(
        IdentityErrorKind.ALREADY_VERIFIED
    )


@pytest.mark.asyncio
async def test_purge_expired_tokens(sql_identity_service, clock):
    await sql_identity_service.register("old@example.com", "Old", "Sup3r$ecret")
    clock.advance(hours=30)
    await sql_identity_service.register("new@example.com", "New", "Sup3r$ecret")

    assert await sql_identity_service.purge_expired_tokens() == 1
    assert await sql_identity_service.purge_expired_tokens() == 0
