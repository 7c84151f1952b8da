import pytest

from credentia.core.exceptions import (
    AccountConflictError,
    AccountNotFoundError,
    AlreadyVerifiedError,
    EmailNotVerifiedError,
    IdentityErrorKind,
    InvalidCredentialsError,
    InvalidOrExpiredTokenError,
)
from credentia.domain.results import Failure, Success


def test_success_unwrap_returns_value():
    result = Success(42)

    assert result.is_success is True
    assert result.unwrap() == 42


@pytest.mark.parametrize(
    "kind, error_type",
    [
        (IdentityErrorKind.ACCOUNT_CONFLICT, AccountConflictError),
        (IdentityErrorKind.INVALID_CREDENTIALS, InvalidCredentialsError),
        (IdentityErrorKind.EMAIL_NOT_VERIFIED, EmailNotVerifiedError),
        (IdentityErrorKind.INVALID_OR_EXPIRED_TOKEN, InvalidOrExpiredTokenError),
        (IdentityErrorKind.ACCOUNT_NOT_FOUND, AccountNotFoundError),
        (IdentityErrorKind.ALREADY_VERIFIED, AlreadyVerifiedError),
    ],
)
def test_failure_unwrap_raises_matching_error(kind, error_type):
    failure = Failure(kind)

    assert failure.is_success is False
    with pytest.raises(error_type) as exc_info:
        failure.unwrap()
    assert exc_info.value.kind is kind
    assert exc_info.value.code == kind.value


def test_results_support_pattern_matching():
    def describe(result):
        match result:
            case Success(value=value):
                return f"ok:{value}"
            case Failure(kind=IdentityErrorKind.ALREADY_VERIFIED):
                return "verified"
            case Failure(kind=kind):
                return kind.value

    assert describe(Success("t")) == "ok:t"
    assert describe(Failure(IdentityErrorKind.ALREADY_VERIFIED)) == "verified"
    assert describe(Failure(IdentityErrorKind.ACCOUNT_NOT_FOUND)) == "account_not_found"
