"""Result types returned by the identity service.

Every identity operation returns ``Success[T] | Failure``. Anticipated
failures are values, not exceptions, so callers handle each
`IdentityErrorKind` explicitly::

    match await service.login(email, secret):
        case Success(value=account):
            ...
        case Failure(kind=IdentityErrorKind.EMAIL_NOT_VERIFIED):
            ...
        case Failure(kind=kind):
            ...

Callers that prefer exceptions can call ``unwrap()``, which returns the
success value or raises the `IdentityError` subclass matching the kind.
"""

from dataclasses import dataclass
from typing import Generic, NoReturn, TypeVar, Union

from credentia.core.exceptions import IdentityError, IdentityErrorKind, error_for_kind
from credentia.domain.value_objects.account_view import AccountView

T = TypeVar("T")

__all__ = [
    "Failure",
    "IdentityErrorKind",
    "Registration",
    "Result",
    "Success",
]


@dataclass(frozen=True)
class Success(Generic[T]):
    """A successful outcome carrying ``value``."""

    value: T

    @property
    def is_success(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Failure:
    """A failed outcome carrying the error ``kind``."""

    kind: IdentityErrorKind

    @property
    def is_success(self) -> bool:
        return False

    def to_exception(self) -> IdentityError:
        """Build the exception matching this failure's kind."""
        return error_for_kind(self.kind)

    def unwrap(self) -> NoReturn:
        raise self.to_exception()


Result = Union[Success[T], Failure]


@dataclass(frozen=True)
class Registration:
    """Outcome of a successful registration.

    Attributes:
        account: Sanitized view of the created account.
        verification_token: The raw token. This is the only place it is ever
            exposed; hand it to the mail delivery collaborator.
    """

    account: AccountView
    verification_token: str

    def __repr__(self) -> str:
        return f"Registration(account={self.account!r}, verification_token='{self.verification_token[:8]}...')"
