"""Interfaces for the two leaf collaborators of the identity service."""

from abc import ABC, abstractmethod
from datetime import datetime


class IPasswordHasher(ABC):
    """One-way credential hashing.

    Implementations are CPU-only and must compare digests in constant time.
    """

    @abstractmethod
    def hash(self, secret: str) -> str:
        """Hashes ``secret`` with a fresh random salt embedded in the result.

        Raises:
            ValueError: If ``secret`` is empty.
        """
        raise NotImplementedError

    @abstractmethod
    def verify(self, secret: str, hashed_value: str) -> bool:
        """Returns whether ``secret`` produces ``hashed_value``.

        Malformed hashes verify as False rather than raising.
        """
        raise NotImplementedError

    def dummy_verify(self) -> bool:
        """Spends the cost of one verification without a real hash.

        Used when no stored hash exists so a failed lookup takes about as long
        as a failed comparison. Always returns False.
        """
        return False


class ITokenGenerator(ABC):
    """Opaque token generation and expiry policy."""

    @abstractmethod
    def now(self) -> datetime:
        """Current UTC time as seen by this generator."""
        raise NotImplementedError

    @abstractmethod
    def generate_token(self) -> str:
        """Returns a new unguessable token string."""
        raise NotImplementedError

    @abstractmethod
    def compute_expiry(self, hours_from_now: float | None = None) -> datetime:
        """Returns ``now + hours_from_now`` hours (default lifetime when None)."""
        raise NotImplementedError

    @abstractmethod
    def is_expired(self, expiry: datetime) -> bool:
        """True iff the current time is strictly after ``expiry``."""
        raise NotImplementedError
