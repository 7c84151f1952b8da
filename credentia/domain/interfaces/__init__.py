"""Domain ports.

The identity service depends only on these abstractions; adapters in
`credentia.infrastructure` implement them.
"""

from .repositories import IAccountRepository, IVerificationTokenRepository
from .security import IPasswordHasher, ITokenGenerator

__all__ = [
    "IAccountRepository",
    "IVerificationTokenRepository",
    "IPasswordHasher",
    "ITokenGenerator",
]
