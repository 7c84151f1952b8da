"""Verification token generation and expiry policy."""

import secrets
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from credentia.core.config.settings import settings
from credentia.domain.interfaces.security import ITokenGenerator


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TokenGenerator(ITokenGenerator):
    """Produces opaque verification tokens and their expiry timestamps.

    Tokens are ``token_bytes`` of randomness from the ``secrets`` module,
    hex encoded: the default 32 bytes give 256 bits and 64 lowercase hex
    characters. Collisions are not checked for; the entropy makes them
    negligible.

    The clock is injectable so expiry can be tested without sleeping.
    """

    def __init__(
        self,
        clock: Optional[Callable[[], datetime]] = None,
        default_lifetime_hours: Optional[float] = None,
        token_bytes: Optional[int] = None,
    ):
        self._clock = clock or _utc_now
        self._default_lifetime_hours = (
            default_lifetime_hours
            if default_lifetime_hours is not None
            else settings.VERIFICATION_TOKEN_EXPIRE_HOURS
        )
        self._token_bytes = token_bytes or settings.VERIFICATION_TOKEN_BYTES

    def now(self) -> datetime:
        return _as_utc(self._clock())

    def generate_token(self) -> str:
        return secrets.token_hex(self._token_bytes)

    def compute_expiry(self, hours_from_now: Optional[float] = None) -> datetime:
        hours = self._default_lifetime_hours if hours_from_now is None else hours_from_now
        return self.now() + timedelta(hours=hours)

    def is_expired(self, expiry: datetime) -> bool:
        return self.now() > _as_utc(expiry)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything credentia stores is UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
