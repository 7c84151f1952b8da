from .password_hasher import BcryptPasswordHasher
from .token_generator import TokenGenerator

__all__ = ["BcryptPasswordHasher", "TokenGenerator"]
