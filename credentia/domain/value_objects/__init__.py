from .account_view import AccountView
from .email import Email

__all__ = ["AccountView", "Email"]
