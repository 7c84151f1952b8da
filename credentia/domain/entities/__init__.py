from .account import Account, Role
from .verification_token import VerificationToken

__all__ = ["Account", "Role", "VerificationToken"]
