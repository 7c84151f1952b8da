"""Identity Domain Service.

This service owns the account and verification-token lifecycle:
registration, credential login, email verification, and resending a
verification token. It also exposes read-only account lookups and the
expired-token maintenance sweep.

Every operation follows the same shape: normalize input, check the relevant
invariant against the stores, mutate, and return a `Result`. Anticipated
failures come back as `Failure(kind)` values; only unanticipated errors
(store outages, driver failures) propagate as exceptions, and none are
retried here.

Collaborators are injected through the constructor. The service holds no
state between calls.
"""

from typing import Optional

import structlog

from credentia.core.exceptions import (
    AccountNotFoundError,
    DuplicateAccountError,
    IdentityErrorKind,
)
from credentia.domain.entities.account import Account
from credentia.domain.interfaces import (
    IAccountRepository,
    IPasswordHasher,
    ITokenGenerator,
    IVerificationTokenRepository,
)
from credentia.domain.results import Failure, Registration, Result, Success
from credentia.domain.value_objects.account_view import AccountView
from credentia.domain.value_objects.email import Email

logger = structlog.get_logger(__name__)


class IdentityService:
    """Domain service for the account and verification-token lifecycle.

    Responsibilities:
    - Register accounts and issue their first verification token
    - Authenticate email/secret pairs and enforce the verification gate
    - Consume verification tokens exactly once
    - Reissue tokens, invalidating every earlier one
    - Return sanitized `AccountView`s only

    Security Features:
    - Unknown email, missing credential and wrong secret share one error kind
    - Unknown and expired tokens share one error kind
    - Failed lookups still pay for a hash verification
    - Emails are masked and tokens truncated in every log event
    """

    def __init__(
        self,
        account_repository: IAccountRepository,
        token_repository: IVerificationTokenRepository,
        password_hasher: IPasswordHasher,
        token_generator: ITokenGenerator,
        token_lifetime_hours: Optional[float] = None,
    ):
        """Initialize the identity service with its collaborators.

        Args:
            account_repository: Store for accounts
            token_repository: Store for outstanding verification tokens
            password_hasher: One-way credential hasher
            token_generator: Token source and expiry policy
            token_lifetime_hours: Lifetime of issued tokens; None uses the
                generator's default (24 hours unless configured otherwise)
        """
        self._accounts = account_repository
        self._tokens = token_repository
        self._hasher = password_hasher
        self._token_generator = token_generator
        self._token_lifetime_hours = token_lifetime_hours

        logger.debug("IdentityService initialized")

    async def register(
        self, email: str, display_name: str, secret: str
    ) -> Result[Registration]:
        """Register a new, unverified account and issue its verification token.

        Args:
            email: Login email; normalized before use
            display_name: Free-form display name
            secret: Plain text secret; only its hash is stored

        Returns:
            Success(Registration) with the sanitized account and the raw token,
            or Failure(ACCOUNT_CONFLICT) if the email is taken. Tokens still
            stored for the email are removed before the new one is issued.
        """
        normalized = Email(email)
        logger.info("Account registration started", email=normalized.mask_for_logging())

        if await self._accounts.exists_by_email(normalized.value):
            logger.warning(
                "Registration failed - email already registered",
                email=normalized.mask_for_logging(),
            )
            return Failure(IdentityErrorKind.ACCOUNT_CONFLICT)

        account = Account(
            email=normalized.value,
            display_name=display_name,
            credential_hash=self._hasher.hash(secret),
            email_verified_at=None,
        )
        try:
            account = await self._accounts.create(account)
        except DuplicateAccountError:
            # A concurrent registration won the race past the existence check.
            logger.warning(
                "Registration failed - uniqueness violation on insert",
                email=normalized.mask_for_logging(),
            )
            return Failure(IdentityErrorKind.ACCOUNT_CONFLICT)

        view = AccountView.from_account(account)
        # Tokens can outlive a deleted account with the same email.
        await self._tokens.delete_all_for_identifier(normalized.value)
        token = await self._issue_token(normalized.value)

        logger.info(
            "Account registration successful",
            account_id=view.id,
            email=normalized.mask_for_logging(),
        )
        return Success(Registration(account=view, verification_token=token))

    async def login(self, email: str, secret: str) -> Result[AccountView]:
        """Authenticate an email/secret pair.

        No session is created; establishing one is the caller's job.

        Returns:
            Success(AccountView), Failure(INVALID_CREDENTIALS) for an unknown
            email, an account without a credential, or a wrong secret, or
            Failure(EMAIL_NOT_VERIFIED) when the secret is right but the
            email is unverified.
        """
        normalized = Email(email)
        account = await self._accounts.find_by_email(normalized.value)

        if account is None or not account.credential_hash:
            self._hasher.dummy_verify()
            logger.info(
                "Login failed - invalid credentials",
                email=normalized.mask_for_logging(),
            )
            return Failure(IdentityErrorKind.INVALID_CREDENTIALS)

        if not self._hasher.verify(secret, account.credential_hash):
            logger.info(
                "Login failed - invalid credentials",
                email=normalized.mask_for_logging(),
            )
            return Failure(IdentityErrorKind.INVALID_CREDENTIALS)

        if account.email_verified_at is None:
            logger.info(
                "Login refused - email not verified",
                account_id=account.id,
            )
            return Failure(IdentityErrorKind.EMAIL_NOT_VERIFIED)

        logger.info("Login successful", account_id=account.id)
        return Success(AccountView.from_account(account))

    async def verify_email(self, token: str) -> Result[AccountView]:
        """Consume a verification token and mark its account verified.

        The token is deleted before the account is updated. Of two concurrent
        calls with the same token only the one whose delete removed it goes
        on to verify; the other gets INVALID_OR_EXPIRED_TOKEN.

        Returns:
            Success(AccountView) with ``email_verified_at`` set,
            Failure(INVALID_OR_EXPIRED_TOKEN) for an unknown, consumed or
            expired token (an expired token is deleted first), or
            Failure(ACCOUNT_NOT_FOUND) if the token outlived its account or
            the account was removed before it could be marked.
        """
        token_prefix = token[:8] if token else "none"
        record = await self._tokens.find_by_token(token) if token else None
        if record is None:
            logger.warning("Email verification with unknown token", token_prefix=token_prefix)
            return Failure(IdentityErrorKind.INVALID_OR_EXPIRED_TOKEN)

        if self._token_generator.is_expired(record.expires_at):
            await self._tokens.delete_by_token(record.token)
            logger.info("Email verification with expired token", token_prefix=token_prefix)
            return Failure(IdentityErrorKind.INVALID_OR_EXPIRED_TOKEN)

        account = await self._accounts.find_by_email(record.identifier)
        if account is None:
            logger.error(
                "Verification token has no matching account",
                token_prefix=token_prefix,
                identifier=Email(record.identifier).mask_for_logging(),
            )
            return Failure(IdentityErrorKind.ACCOUNT_NOT_FOUND)

        account_id = account.id
        if not await self._tokens.delete_by_token(record.token):
            logger.warning(
                "Verification token consumed concurrently",
                token_prefix=token_prefix,
                account_id=account_id,
            )
            return Failure(IdentityErrorKind.INVALID_OR_EXPIRED_TOKEN)

        try:
            account = await self._accounts.mark_email_verified(
                account_id, self._token_generator.now()
            )
        except AccountNotFoundError:
            logger.error(
                "Account removed while its verification token was consumed",
                token_prefix=token_prefix,
                account_id=account_id,
            )
            return Failure(IdentityErrorKind.ACCOUNT_NOT_FOUND)

        logger.info("Email verification completed", account_id=account.id)
        return Success(AccountView.from_account(account))

    async def resend_verification(self, email: str) -> Result[str]:
        """Invalidate every outstanding token for ``email`` and issue a new one.

        The delete and the create are separate store calls; a brief window
        with no live token is acceptable.

        Returns:
            Success(raw_token), Failure(ACCOUNT_NOT_FOUND), or
            Failure(ALREADY_VERIFIED). No token is created on failure.
        """
        normalized = Email(email)
        account = await self._accounts.find_by_email(normalized.value)
        if account is None:
            logger.warning(
                "Resend verification for unknown email",
                email=normalized.mask_for_logging(),
            )
            return Failure(IdentityErrorKind.ACCOUNT_NOT_FOUND)

        if account.email_verified_at is not None:
            logger.info(
                "Resend verification skipped - already verified",
                account_id=account.id,
            )
            return Failure(IdentityErrorKind.ALREADY_VERIFIED)

        account_id = account.id
        removed = await self._tokens.delete_all_for_identifier(normalized.value)
        token = await self._issue_token(normalized.value)

        logger.info(
            "Verification token reissued",
            account_id=account_id,
            invalidated_tokens=removed,
        )
        return Success(token)

    async def get_account_by_id(self, account_id: str) -> Optional[AccountView]:
        """Read-only lookup by identifier."""
        account = await self._accounts.find_by_id(account_id)
        return AccountView.from_account(account) if account else None

    async def get_account_by_email(self, email: str) -> Optional[AccountView]:
        """Read-only lookup by (case-insensitive) email."""
        account = await self._accounts.find_by_email(Email.normalize(email))
        return AccountView.from_account(account) if account else None

    async def purge_expired_tokens(self) -> int:
        """Delete every expired verification token.

        Expired tokens are otherwise only removed when someone tries to use
        them. Nothing in credentia schedules this; run it from a cron job or
        task runner.

        Returns:
            The number of tokens removed.
        """
        removed = await self._tokens.delete_all_expired(self._token_generator.now())
        logger.info("Expired verification tokens purged", removed=removed)
        return removed

    async def _issue_token(self, identifier: str) -> str:
        token = self._token_generator.generate_token()
        expires_at = self._token_generator.compute_expiry(self._token_lifetime_hours)
        await self._tokens.create(identifier=identifier, token=token, expires_at=expires_at)
        logger.debug(
            "Verification token issued",
            token_prefix=token[:8],
            expires_at=expires_at.isoformat(),
        )
        return token
