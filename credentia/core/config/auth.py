"""Credential hashing and verification token settings.
"""

from pydantic import Field
from pydantic_settings import BaseSettings


class AuthSettings(BaseSettings):
    """Defines settings for credential hashing and email verification tokens.

    Security Note:
        - BCRYPT_WORK_FACTOR below 12 is only appropriate for test suites; it is
          the main defence against offline cracking of a leaked hash table.
        - VERIFICATION_TOKEN_BYTES controls token entropy. 32 bytes (256 bits)
          makes online and offline guessing infeasible.
    """

    BCRYPT_WORK_FACTOR: int = Field(ge=4, le=31, default=12)

    VERIFICATION_TOKEN_EXPIRE_HOURS: float = Field(gt=0, default=24)
    VERIFICATION_TOKEN_BYTES: int = Field(ge=16, default=32)
