"""Verification token entity.

A verification token proves control of an email address. It is created on
registration or resend, deleted on successful consumption or on detection of
expiry, and never updated.
"""

from datetime import datetime

from sqlalchemy import DateTime
from sqlmodel import Column, Field, SQLModel, String


class VerificationToken(SQLModel, table=True):
    """An outstanding, single-use email verification token.

    Attributes:
        identifier: Normalized email the token was issued for. This is a loose
            reference by email, not a foreign key to the account id.
        token: Opaque 64-character hex string, unique across all tokens.
        expires_at: Instant after which the token can no longer be consumed.
    """

    __tablename__ = "verification_tokens"

    identifier: str = Field(
        primary_key=True,
        max_length=254,
        description="Normalized email the token authenticates.",
    )
    token: str = Field(
        sa_column=Column(String(128), primary_key=True, unique=True, index=True, nullable=False),
        description="Opaque, globally unique token value.",
    )
    expires_at: datetime = Field(
        sa_column=Column(DateTime(timezone=True), index=True, nullable=False),
        description="Expiry timestamp (UTC).",
    )

    def __repr__(self) -> str:
        return f"VerificationToken(token_prefix={self.token[:8]!r}, expires_at={self.expires_at!r})"
