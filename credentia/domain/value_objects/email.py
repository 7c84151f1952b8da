"""A Value Object representing a normalized email address.

Emails are the sole login key and the identifier verification tokens are
issued for, so every comparison and store lookup goes through this class.
Shape validation (RFC format, length) belongs to the calling layer; this
object only normalizes and refuses blank input.
"""

from dataclasses import dataclass

from structlog import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class Email:
    """An immutable, normalized email address.

    Normalization trims surrounding whitespace and lower-cases the whole
    address, so ``" A@Example.com "`` and ``"a@example.com"`` are equal.

    Attributes:
        value: The normalized email string.
    """

    value: str

    def __post_init__(self):
        """Performs normalization after initialization."""
        if not isinstance(self.value, str):
            raise TypeError("Email value must be a string.")

        normalized_value = self.value.strip().lower()
        if not normalized_value:
            raise ValueError("Email cannot be empty or whitespace-only.")
        object.__setattr__(self, "value", normalized_value)

    @classmethod
    def normalize(cls, raw: str) -> str:
        """Returns the normalized string form of ``raw``."""
        return cls(raw).value

    @property
    def domain(self) -> str:
        """Returns the domain part of the email address, or an empty string."""
        return self.value.rpartition("@")[2] if "@" in self.value else ""

    def mask_for_logging(self) -> str:
        """Returns a masked version of the email for safe logging.

        Example: 'al***@e*****.com'
        """
        local, sep, domain_part = self.value.rpartition("@")
        if not sep:
            return self.value[:2] + "***"
        masked_local = f"{local[:2]}***"
        if len(domain_part) <= 2:
            return f"{masked_local}@{domain_part}"
        masked_domain = f"{domain_part[:1]}{'*' * (len(domain_part) - 2)}{domain_part[-1:]}"
        return f"{masked_local}@{masked_domain}"

    def __str__(self) -> str:
        return self.value
