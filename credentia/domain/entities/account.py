from datetime import datetime, timezone  # For timestamp fields
from enum import Enum  # For type-safe role enumeration
from typing import Optional  # For optional fields
from uuid import uuid4  # For opaque identifiers

from sqlalchemy import DateTime  # Explicit timezone-aware DateTime type
from sqlmodel import Column, Field, SQLModel, String  # For ORM and table definition


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Role(str, Enum):
    """Represents the role of an account.

    Assigned at creation and never changed by the identity lifecycle.

    Attributes:
        ADMIN: Administrative account.
        USER: Standard, unprivileged account (the default).
    """

    ADMIN = "admin"
    USER = "user"


class Account(SQLModel, table=True):
    """Represents an Account entity, the aggregate root of the identity lifecycle.

    An account is keyed by its normalized email address. It may exist without a
    credential hash (for example when created by an external identity
    provider); such an account can never pass credential login.

    The entity is internal to the store layer. Anything leaving the identity
    service is converted to `AccountView`, which has no credential field.

    Attributes:
        id: Opaque identifier assigned at creation (primary key).
        email: Unique, lower-cased, trimmed email address.
        display_name: Free-form display name.
        credential_hash: Bcrypt hash of the account secret, or None.
        image: Optional avatar URL.
        email_verified_at: When the email was verified; None while unverified.
        role: The account role.
        created_at: Creation timestamp (UTC).
        updated_at: Last modification timestamp (UTC).
    """

    __tablename__ = "accounts"

    id: str = Field(
        default_factory=lambda: uuid4().hex,
        primary_key=True,
        max_length=32,
        description="Opaque, immutable account identifier.",
    )
    email: str = Field(
        sa_column=Column(String(254), unique=True, index=True, nullable=False),  # Unique, indexed column
        description="Unique, normalized (lower-case) email address used for login.",
    )
    display_name: str = Field(
        max_length=255,
        description="Free-form display name.",
    )
    credential_hash: Optional[str] = Field(
        default=None,
        max_length=255,  # Sufficient for bcrypt hashes
        description="Bcrypt hash of the account secret. Null for accounts without a credential.",
    )
    image: Optional[str] = Field(
        default=None,
        description="Optional avatar URL.",
    )
    email_verified_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), nullable=True),
        description="Timestamp of email verification. Null means unverified.",
    )
    role: Role = Field(
        default=Role.USER,
        description="The account role.",
    )
    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
        description="The timestamp of when the account was created.",
    )
    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
        description="The timestamp of the last update to the account.",
    )

    @property
    def is_verified(self) -> bool:
        """Whether the account's email address has been verified."""
        return self.email_verified_at is not None

    def __repr__(self) -> str:
        # Keeps credential_hash out of reprs that end up in logs and tracebacks.
        return f"Account(id={self.id!r}, verified={self.is_verified})"
