"""Sanitized, read-only projection of an account."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from credentia.domain.entities.account import Account, Role


class AccountView(BaseModel):
    """The only account representation that leaves the identity service.

    It deliberately has no credential field: the hash cannot be serialized,
    logged, or returned to a caller through this type.
    """

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: str
    email: str
    display_name: str
    image: Optional[str] = None
    email_verified_at: Optional[datetime] = None
    role: Role = Role.USER
    created_at: datetime
    updated_at: datetime

    @property
    def is_verified(self) -> bool:
        return self.email_verified_at is not None

    @classmethod
    def from_account(cls, account: Account) -> "AccountView":
        """Project an `Account` entity, dropping its credential hash."""
        return cls(
            id=account.id,
            email=account.email,
            display_name=account.display_name,
            image=account.image,
            email_verified_at=account.email_verified_at,
            role=account.role,
            created_at=account.created_at,
            updated_at=account.updated_at,
        )
