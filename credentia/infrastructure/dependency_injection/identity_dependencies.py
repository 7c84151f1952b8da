"""Dependency wiring for the identity service.

Builds `IdentityService` instances from explicit collaborators. There are no
module-level service singletons: callers construct one service per unit of
work (typically per database session) or per process for the in-memory
stores.
"""

from datetime import datetime
from typing import Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from credentia.domain.interfaces import (
    IAccountRepository,
    IPasswordHasher,
    ITokenGenerator,
    IVerificationTokenRepository,
)
from credentia.domain.services.identity import IdentityService
from credentia.infrastructure.repositories import (
    AccountRepository,
    InMemoryAccountRepository,
    InMemoryVerificationTokenRepository,
    VerificationTokenRepository,
)
from credentia.infrastructure.services import BcryptPasswordHasher, TokenGenerator


def get_account_repository(session: Optional[AsyncSession] = None) -> IAccountRepository:
    """Factory for the account store: SQL when a session is given, in-memory otherwise."""
    return AccountRepository(session) if session is not None else InMemoryAccountRepository()


def get_token_repository(session: Optional[AsyncSession] = None) -> IVerificationTokenRepository:
    """Factory for the verification token store."""
    if session is not None:
        return VerificationTokenRepository(session)
    return InMemoryVerificationTokenRepository()


def build_identity_service(
    session: Optional[AsyncSession] = None,
    *,
    account_repository: Optional[IAccountRepository] = None,
    token_repository: Optional[IVerificationTokenRepository] = None,
    password_hasher: Optional[IPasswordHasher] = None,
    token_generator: Optional[ITokenGenerator] = None,
    bcrypt_rounds: Optional[int] = None,
    clock: Optional[Callable[[], datetime]] = None,
) -> IdentityService:
    """Assemble an `IdentityService`.

    Args:
        session: Async session for the SQL stores. When omitted, fresh
            in-memory stores are used.
        account_repository: Explicit account store, overriding ``session``.
        token_repository: Explicit token store, overriding ``session``.
        password_hasher: Explicit hasher; defaults to bcrypt.
        token_generator: Explicit token generator.
        bcrypt_rounds: Work factor for the default hasher.
        clock: Clock for the default token generator.

    Returns:
        IdentityService: A service bound to the chosen collaborators.
    """
    return IdentityService(
        account_repository=account_repository or get_account_repository(session),
        token_repository=token_repository or get_token_repository(session),
        password_hasher=password_hasher or BcryptPasswordHasher(rounds=bcrypt_rounds),
        token_generator=token_generator or TokenGenerator(clock=clock),
    )
