from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from sqlalchemy.pool import StaticPool

from credentia.domain.services.identity import IdentityService
from credentia.infrastructure.database.async_db import (
    build_async_engine,
    build_session_factory,
    create_async_db_and_tables,
)
from credentia.infrastructure.repositories import (
    InMemoryAccountRepository,
    InMemoryVerificationTokenRepository,
)
from credentia.infrastructure.services import BcryptPasswordHasher, TokenGenerator

# Minimum bcrypt work factor; keeps the suite fast.
TEST_BCRYPT_ROUNDS = 4


class FakeClock:
    """Settable UTC clock for simulating token expiry."""

    def __init__(self, start: datetime | None = None):
        self.current = start or datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> None:
        self.current += timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture(scope="session")
def password_hasher() -> BcryptPasswordHasher:
    return BcryptPasswordHasher(rounds=TEST_BCRYPT_ROUNDS)


@pytest.fixture
def token_generator(clock: FakeClock) -> TokenGenerator:
    return TokenGenerator(clock=clock, default_lifetime_hours=24)


@pytest.fixture
def account_repository() -> InMemoryAccountRepository:
    return InMemoryAccountRepository()


@pytest.fixture
def token_repository() -> InMemoryVerificationTokenRepository:
    return InMemoryVerificationTokenRepository()


@pytest.fixture
def identity_service(
    account_repository, token_repository, password_hasher, token_generator
) -> IdentityService:
    return IdentityService(
        account_repository=account_repository,
        token_repository=token_repository,
        password_hasher=password_hasher,
        token_generator=token_generator,
    )


@pytest_asyncio.fixture
async def sql_engine():
    engine = build_async_engine("sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool)
    await create_async_db_and_tables(engine)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest_asyncio.fixture
async def async_session(sql_engine):
    session_factory = build_session_factory(sql_engine)
    async with session_factory() as session:
        yield session
