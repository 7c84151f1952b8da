"""Verification token repository implementation using SQLAlchemy.

Deletes are issued as single ``DELETE`` statements and report the affected
row count, so two sessions deleting the same token cannot both observe
success: the database serializes the row removal and the loser sees a
count of zero.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from structlog import get_logger

from credentia.core.exceptions import DatabaseError
from credentia.domain.entities.verification_token import VerificationToken
from credentia.domain.interfaces.repositories import IVerificationTokenRepository

logger = get_logger(__name__)


class VerificationTokenRepository(IVerificationTokenRepository):
    """SQLAlchemy implementation of the verification token store."""

    def __init__(self, db_session: AsyncSession):
        self.db_session = db_session

    async def create(self, identifier: str, token: str, expires_at: datetime) -> VerificationToken:
        record = VerificationToken(identifier=identifier, token=token, expires_at=expires_at)
        self.db_session.add(record)
        try:
            await self.db_session.commit()
        except SQLAlchemyError as e:
            await self.db_session.rollback()
            logger.error(
                "Error storing verification token",
                token_prefix=token[:8],
                error_type=type(e).__name__,
            )
            raise DatabaseError("Failed to store verification token") from e
        return record

    async def find_by_token(self, token: str) -> Optional[VerificationToken]:
        statement = select(VerificationToken).where(VerificationToken.token == token)
        return await self._first(statement)

    async def find_by_identifier_and_token(
        self, identifier: str, token: str
    ) -> Optional[VerificationToken]:
        statement = select(VerificationToken).where(
            VerificationToken.identifier == identifier,
            VerificationToken.token == token,
        )
        return await self._first(statement)

    async def delete_by_token(self, token: str) -> bool:
        removed = await self._delete(VerificationToken.token == token, "delete_by_token")
        return removed > 0

    async def delete_all_for_identifier(self, identifier: str) -> int:
        return await self._delete(
            VerificationToken.identifier == identifier, "delete_all_for_identifier"
        )

    async def delete_all_expired(self, now: datetime) -> int:
        return await self._delete(VerificationToken.expires_at < now, "delete_all_expired")

    async def _first(self, statement) -> Optional[VerificationToken]:
        try:
            result = await self.db_session.execute(statement)
        except SQLAlchemyError as e:
            logger.error("Error retrieving verification token", error_type=type(e).__name__)
            raise DatabaseError("Failed to query verification tokens") from e
        return result.scalars().first()

    async def _delete(self, criterion, operation: str) -> int:
        statement = (
            delete(VerificationToken)
            .where(criterion)
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self.db_session.execute(statement)
            await self.db_session.commit()
        except SQLAlchemyError as e:
            await self.db_session.rollback()
            logger.error(
                "Error deleting verification tokens",
                error_type=type(e).__name__,
                operation=operation,
            )
            raise DatabaseError("Failed to delete verification tokens") from e
        logger.debug("Verification tokens deleted", removed=result.rowcount, operation=operation)
        return result.rowcount
