from __future__ import annotations

import pytest

from fakes import FakeAccountsPort, FakeTokenPort, make_user
from mediscan.application.dto.auth import AuthenticateRequestInput
from mediscan.application.use_cases.authenticate_request import AuthenticateRequestUseCase
from mediscan.domain.exceptions import RefreshTokenInvalidError, UnauthorizedError, UserInactiveError


def _use_case(accounts_port: FakeAccountsPort, token_port: FakeTokenPort | None = None):
    return AuthenticateRequestUseCase(accounts_port=accounts_port, token_port=token_port or FakeTokenPort())


def _accounts(**user_overrides) -> FakeAccountsPort:
    accounts_port = FakeAccountsPort()
    accounts_port.add(make_user(**user_overrides))
    return accounts_port


def test_missing_access_token_is_rejected():
    with pytest.raises(UnauthorizedError) as exc_info:
        _use_case(_accounts()).execute(AuthenticateRequestInput(access_token=None, refresh_token="refresh::user-1"))

    assert exc_info.value.message == "Access token required"


def test_valid_access_token_attaches_user_without_renewal():
    token_port = FakeTokenPort()

    result = _use_case(_accounts(), token_port).execute(
        AuthenticateRequestInput(access_token="access::user-1", refresh_token=None)
    )

    assert result.user.id == "user-1"
    assert result.renewed_access_token is None
    assert token_port.issued_access == []


def test_valid_access_token_for_deleted_user_is_rejected():
    with pytest.raises(UnauthorizedError) as exc_info:
        _use_case(FakeAccountsPort()).execute(
            AuthenticateRequestInput(access_token="access::user-1", refresh_token=None)
        )

    assert exc_info.value.message == "User not found"


def test_expired_access_without_refresh_asks_to_login_again():
    with pytest.raises(UnauthorizedError) as exc_info:
        _use_case(_accounts()).execute(AuthenticateRequestInput(access_token="expired", refresh_token=None))

    assert exc_info.value.message == "Please login again"


def test_expired_access_with_invalid_refresh_is_rejected():
    with pytest.raises(RefreshTokenInvalidError) as exc_info:
        _use_case(_accounts()).execute(AuthenticateRequestInput(access_token="expired", refresh_token="expired"))

    assert exc_info.value.message == "Invalid refresh token"


def test_refresh_token_is_not_accepted_as_access_token():
    with pytest.raises(UnauthorizedError) as exc_info:
        _use_case(_accounts()).execute(AuthenticateRequestInput(access_token="refresh::user-1", refresh_token=None))

    assert exc_info.value.message == "Please login again"


def test_expired_access_with_valid_refresh_renews_silently():
    token_port = FakeTokenPort()

    result = _use_case(_accounts(), token_port).execute(
        AuthenticateRequestInput(access_token="expired", refresh_token="refresh::user-1")
    )

    assert result.user.id == "user-1"
    assert result.renewed_access_token == "access::user-1"
    assert token_port.issued_access == ["access::user-1"]


def test_inactive_user_is_forbidden():
    with pytest.raises(UserInactiveError) as exc_info:
        _use_case(_accounts(is_active=False)).execute(
            AuthenticateRequestInput(access_token="access::user-1", refresh_token=None)
        )

    assert exc_info.value.status_code == 403
