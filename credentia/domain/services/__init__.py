from .identity import IdentityService

__all__ = ["IdentityService"]
