"""Repository interfaces for abstracting persistence in the domain layer.

These abstract base classes are the "ports" the identity service talks to.
Concrete adapters live in `credentia.infrastructure.repositories`. The
service never issues raw queries; it only calls the operations below.

Stores perform mechanical persistence. All token creation and deletion
policy (when to issue, when to invalidate) belongs to the identity service.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from credentia.domain.entities.account import Account
from credentia.domain.entities.verification_token import VerificationToken


class IAccountRepository(ABC):
    """Contract for account persistence.

    Emails passed to these methods are matched case-insensitively. Adapters
    must enforce uniqueness of the normalized email themselves: `create`
    raises `DuplicateAccountError` when an insert would violate it, even if
    a concurrent writer slipped past the service's `exists_by_email` check.
    """

    @abstractmethod
    async def create(self, account: Account) -> Account:
        """Persists a new account.

        Args:
            account: The account to insert. Its email is already normalized.

        Returns:
            The stored account.

        Raises:
            DuplicateAccountError: If an account with the same email exists.
        """
        raise NotImplementedError

    @abstractmethod
    async def find_by_id(self, account_id: str) -> Optional[Account]:
        """Retrieves an account by its identifier, or None."""
        raise NotImplementedError

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[Account]:
        """Retrieves an account by email (case-insensitively), or None."""
        raise NotImplementedError

    @abstractmethod
    async def exists_by_email(self, email: str) -> bool:
        """Checks whether an account with this email (case-insensitively) exists."""
        raise NotImplementedError

    @abstractmethod
    async def mark_email_verified(self, account_id: str, verified_at: datetime) -> Account:
        """Sets ``email_verified_at`` on the account.

        Args:
            account_id: Identifier of the account to update.
            verified_at: The verification instant.

        Returns:
            The updated account.

        Raises:
            AccountNotFoundError: If no account has this identifier.
        """
        raise NotImplementedError

    @abstractmethod
    async def update(self, account: Account) -> Account:
        """Persists changes to an existing account and refreshes ``updated_at``.

        Raises:
            AccountNotFoundError: If the account does not exist.
            DuplicateAccountError: If the change violates email uniqueness.
        """
        raise NotImplementedError

    @abstractmethod
    async def delete(self, account_id: str) -> bool:
        """Deletes an account.

        Returns:
            True if an account was removed, False if none existed.
        """
        raise NotImplementedError


class IVerificationTokenRepository(ABC):
    """Contract for verification token persistence.

    Tokens are immutable: there is no update operation. ``delete_by_token``
    must be atomic enough that, of two concurrent callers deleting the same
    token, exactly one observes ``True``.
    """

    @abstractmethod
    async def create(self, identifier: str, token: str, expires_at: datetime) -> VerificationToken:
        """Stores a new token for ``identifier``."""
        raise NotImplementedError

    @abstractmethod
    async def find_by_token(self, token: str) -> Optional[VerificationToken]:
        """Looks a token up by its value alone (values are globally unique)."""
        raise NotImplementedError

    @abstractmethod
    async def find_by_identifier_and_token(
        self, identifier: str, token: str
    ) -> Optional[VerificationToken]:
        """Looks a token up by its (identifier, token) key."""
        raise NotImplementedError

    @abstractmethod
    async def delete_by_token(self, token: str) -> bool:
        """Deletes a token.

        Returns:
            True if this call removed the token, False if it was already gone.
        """
        raise NotImplementedError

    @abstractmethod
    async def delete_all_for_identifier(self, identifier: str) -> int:
        """Deletes every token issued for ``identifier``.

        Returns:
            The number of tokens removed.
        """
        raise NotImplementedError

    @abstractmethod
    async def delete_all_expired(self, now: datetime) -> int:
        """Deletes every token whose ``expires_at`` is before ``now``.

        Returns:
            The number of tokens removed.
        """
        raise NotImplementedError
