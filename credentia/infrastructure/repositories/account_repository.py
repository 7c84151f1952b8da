"""Account repository implementation using SQLAlchemy.

This module provides the SQL adapter for the `IAccountRepository` port. It
works against any SQLAlchemy async session (PostgreSQL via asyncpg, SQLite
via aiosqlite).

Email uniqueness is enforced by the unique index on ``accounts.email``; an
insert or update that violates it is rolled back and surfaces as
`DuplicateAccountError`. Every other driver failure is rolled back and
wrapped in `DatabaseError`.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from structlog import get_logger

from credentia.core.exceptions import AccountNotFoundError, DatabaseError, DuplicateAccountError
from credentia.domain.entities.account import Account
from credentia.domain.interfaces.repositories import IAccountRepository
from credentia.domain.value_objects.email import Email

logger = get_logger(__name__)


class AccountRepository(IAccountRepository):
    """SQLAlchemy implementation of the account store.

    Each mutating call commits its own transaction; the identity service has
    no unit of work spanning several store calls.
    """

    def __init__(self, db_session: AsyncSession):
        """Initialize repository with database session.

        Args:
            db_session: SQLAlchemy async session for database operations
        """
        self.db_session = db_session

    async def create(self, account: Account) -> Account:
        account.email = Email.normalize(account.email)
        self.db_session.add(account)
        try:
            await self.db_session.commit()
        except IntegrityError as e:
            await self.db_session.rollback()
            logger.warning(
                "Account insert violated uniqueness",
                email=Email(account.email).mask_for_logging(),
                operation="create",
            )
            raise DuplicateAccountError() from e
        except SQLAlchemyError as e:
            await self.db_session.rollback()
            logger.error(
                "Error creating account",
                error=str(e),
                error_type=type(e).__name__,
                operation="create",
            )
            raise DatabaseError("Failed to create account") from e

        await self.db_session.refresh(account)
        logger.debug("Account created", account_id=account.id, operation="create")
        return account

    async def find_by_id(self, account_id: str) -> Optional[Account]:
        return await self._first(select(Account).where(Account.id == account_id), "find_by_id")

    async def find_by_email(self, email: str) -> Optional[Account]:
        """Get account by email, case-insensitively.

        Emails are stored normalized; the ``lower()`` comparison also catches
        rows written by other tools that skipped normalization.
        """
        normalized = Email.normalize(email)
        statement = select(Account).where(func.lower(Account.email) == normalized)
        return await self._first(statement, "find_by_email")

    async def exists_by_email(self, email: str) -> bool:
        normalized = Email.normalize(email)
        statement = select(Account.id).where(func.lower(Account.email) == normalized).limit(1)
        try:
            result = await self.db_session.execute(statement)
        except SQLAlchemyError as e:
            logger.error("Error checking account email", error=str(e), operation="exists_by_email")
            raise DatabaseError("Failed to query accounts") from e
        return result.first() is not None

    async def mark_email_verified(self, account_id: str, verified_at: datetime) -> Account:
        account = await self.find_by_id(account_id)
        if account is None:
            raise AccountNotFoundError()
        account.email_verified_at = verified_at
        return await self._commit_update(account, "mark_email_verified")

    async def update(self, account: Account) -> Account:
        if await self.find_by_id(account.id) is None:
            raise AccountNotFoundError()
        account.email = Email.normalize(account.email)
        account = await self.db_session.merge(account)
        return await self._commit_update(account, "update")

    async def delete(self, account_id: str) -> bool:
        account = await self.find_by_id(account_id)
        if account is None:
            return False
        try:
            await self.db_session.delete(account)
            await self.db_session.commit()
        except SQLAlchemyError as e:
            await self.db_session.rollback()
            logger.error("Error deleting account", account_id=account_id, error=str(e))
            raise DatabaseError("Failed to delete account") from e
        logger.debug("Account deleted", account_id=account_id, operation="delete")
        return True

    async def _first(self, statement, operation: str) -> Optional[Account]:
        try:
            result = await self.db_session.execute(statement)
        except SQLAlchemyError as e:
            logger.error(
                "Error retrieving account",
                error=str(e),
                error_type=type(e).__name__,
                operation=operation,
            )
            raise DatabaseError("Failed to query accounts") from e
        account = result.scalars().first()
        logger.debug("Account lookup completed", found=account is not None, operation=operation)
        return account

    async def _commit_update(self, account: Account, operation: str) -> Account:
        account.updated_at = datetime.now(timezone.utc)
        self.db_session.add(account)
        try:
            await self.db_session.commit()
        except IntegrityError as e:
            await self.db_session.rollback()
            raise DuplicateAccountError() from e
        except SQLAlchemyError as e:
            await self.db_session.rollback()
            logger.error("Error updating account", account_id=account.id, error=str(e), operation=operation)
            raise DatabaseError("Failed to update account") from e
        await self.db_session.refresh(account)
        return account
