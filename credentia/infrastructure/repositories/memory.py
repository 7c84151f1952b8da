"""In-memory store adapters.

Process-local implementations of the repository ports. They back the test
suite and single-process tools, and they define the reference semantics the
SQL adapters must match: case-insensitive email keys, uniqueness enforced on
insert, and atomic check-and-delete for tokens. Each store guards its state
with an `asyncio.Lock`, so concurrent coroutines on one event loop see
serialized operations.

`InMemoryVerificationTokenRepository.count_for_identifier` is an inspection
helper outside the repository port, for tests and local tooling.
"""

import asyncio
from datetime import datetime, timezone
from typing import Dict, Optional

from structlog import get_logger

from credentia.core.exceptions import AccountNotFoundError, DuplicateAccountError
from credentia.domain.entities.account import Account
from credentia.domain.entities.verification_token import VerificationToken
from credentia.domain.interfaces.repositories import (
    IAccountRepository,
    IVerificationTokenRepository,
)
from credentia.domain.value_objects.email import Email

logger = get_logger(__name__)


def _as_utc(value: datetime) -> datetime:
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value


class InMemoryAccountRepository(IAccountRepository):
    """Dictionary-backed account store keyed by id, indexed by normalized email."""

    def __init__(self) -> None:
        self._by_id: Dict[str, Account] = {}
        self._id_by_email: Dict[str, str] = {}
        self._email_by_id: Dict[str, str] = {}
        self._lock = asyncio.Lock()

    async def create(self, account: Account) -> Account:
        email = Email.normalize(account.email)
        async with self._lock:
            if email in self._id_by_email:
                raise DuplicateAccountError()
            account.email = email
            self._by_id[account.id] = account
            self._id_by_email[email] = account.id
            self._email_by_id[account.id] = email
        logger.debug("Account stored", account_id=account.id)
        return account

    async def find_by_id(self, account_id: str) -> Optional[Account]:
        return self._by_id.get(account_id)

    async def find_by_email(self, email: str) -> Optional[Account]:
        account_id = self._id_by_email.get(Email.normalize(email))
        return self._by_id.get(account_id) if account_id else None

    async def exists_by_email(self, email: str) -> bool:
        return Email.normalize(email) in self._id_by_email

    async def mark_email_verified(self, account_id: str, verified_at: datetime) -> Account:
        async with self._lock:
            account = self._by_id.get(account_id)
            if account is None:
                raise AccountNotFoundError()
            account.email_verified_at = verified_at
            account.updated_at = datetime.now(timezone.utc)
        return account

    async def update(self, account: Account) -> Account:
        email = Email.normalize(account.email)
        async with self._lock:
            if account.id not in self._by_id:
                raise AccountNotFoundError()
            owner = self._id_by_email.get(email)
            if owner is not None and owner != account.id:
                raise DuplicateAccountError()
            # The caller may have mutated the stored instance; the old key comes from the index.
            self._id_by_email.pop(self._email_by_id[account.id], None)
            account.email = email
            account.updated_at = datetime.now(timezone.utc)
            self._by_id[account.id] = account
            self._id_by_email[email] = account.id
            self._email_by_id[account.id] = email
        return account

    async def delete(self, account_id: str) -> bool:
        async with self._lock:
            account = self._by_id.pop(account_id, None)
            if account is None:
                return False
            self._id_by_email.pop(self._email_by_id.pop(account_id), None)
        return True


class InMemoryVerificationTokenRepository(IVerificationTokenRepository):
    """Dictionary-backed token store keyed by token value."""

    def __init__(self) -> None:
        self._by_token: Dict[str, VerificationToken] = {}
        self._lock = asyncio.Lock()

    async def create(self, identifier: str, token: str, expires_at: datetime) -> VerificationToken:
        record = VerificationToken(identifier=identifier, token=token, expires_at=expires_at)
        async with self._lock:
            if token in self._by_token:
                raise ValueError("Verification token value already exists")
            self._by_token[token] = record
        return record

    async def find_by_token(self, token: str) -> Optional[VerificationToken]:
        return self._by_token.get(token)

    async def find_by_identifier_and_token(
        self, identifier: str, token: str
    ) -> Optional[VerificationToken]:
        record = self._by_token.get(token)
        if record is None or record.identifier != identifier:
            return None
        return record

    async def delete_by_token(self, token: str) -> bool:
        async with self._lock:
            return self._by_token.pop(token, None) is not None

    async def delete_all_for_identifier(self, identifier: str) -> int:
        async with self._lock:
            doomed = [t for t, r in self._by_token.items() if r.identifier == identifier]
            for token in doomed:
                del self._by_token[token]
        return len(doomed)

    async def delete_all_expired(self, now: datetime) -> int:
        now = _as_utc(now)
        async with self._lock:
            doomed = [t for t, r in self._by_token.items() if _as_utc(r.expires_at) < now]
            for token in doomed:
                del self._by_token[token]
        return len(doomed)

    def count_for_identifier(self, identifier: str) -> int:
        """Number of outstanding tokens for ``identifier``.

        Part of the in-memory store's inspection API; not on the port, so
        the identity service never depends on it.
        """
        return sum(1 for r in self._by_token.values() if r.identifier == identifier)
