from .account_repository import AccountRepository
from .memory import InMemoryAccountRepository, InMemoryVerificationTokenRepository
from .verification_token_repository import VerificationTokenRepository

__all__ = [
    "AccountRepository",
    "VerificationTokenRepository",
    "InMemoryAccountRepository",
    "InMemoryVerificationTokenRepository",
]
