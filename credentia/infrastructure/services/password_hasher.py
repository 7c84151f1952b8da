"""Bcrypt credential hashing.

This module provides the password hasher used by the identity service,
built on passlib's `CryptContext` with the bcrypt scheme.
"""

from passlib.context import CryptContext
from structlog import get_logger

from credentia.core.config.settings import settings
from credentia.domain.interfaces.security import IPasswordHasher

logger = get_logger(__name__)


class BcryptPasswordHasher(IPasswordHasher):
    """Hashes and verifies secrets with bcrypt.

    Security:
        - A fresh salt is generated for every hash and embedded in the output
        - Verification uses passlib's constant-time digest comparison
        - The work factor makes every hash and verify deliberately slow; expect
          it to dominate register and login latency
    """

    def __init__(self, rounds: int | None = None):
        """Initialize the hasher.

        Args:
            rounds: bcrypt work factor; defaults to ``settings.BCRYPT_WORK_FACTOR``.
        """
        self._rounds = rounds or settings.BCRYPT_WORK_FACTOR
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=self._rounds,
        )

    @property
    def rounds(self) -> int:
        return self._rounds

    def hash(self, secret: str) -> str:
        """Hash a secret using bcrypt.

        Args:
            secret: Plain text secret to hash

        Returns:
            str: Bcrypt hash (``$2b$...``, 60 characters)

        Raises:
            ValueError: If the secret is empty
        """
        if not secret:
            raise ValueError("Secret cannot be empty")
        return self._context.hash(secret)

    def verify(self, secret: str, hashed_value: str) -> bool:
        """Verify a secret against a bcrypt hash.

        Args:
            secret: Plain text secret to verify
            hashed_value: Bcrypt hash to verify against

        Returns:
            bool: True if the secret matches. False for a mismatch, an empty
            secret, or a hash passlib cannot identify.
        """
        if not secret or not hashed_value:
            return False
        try:
            return self._context.verify(secret, hashed_value)
        except (ValueError, TypeError) as e:
            logger.warning(
                "Credential verification against malformed hash",
                error_type=type(e).__name__,
            )
            return False

    def dummy_verify(self) -> bool:
        self._context.dummy_verify()
        return False
