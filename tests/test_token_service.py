from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from mediscan.application.dto.auth import TokenInvalid, TokenValid
from mediscan.infrastructure.security.token_service import JwtTokenService


ACCESS_SECRET = "access-secret-for-tests-0123456789"
REFRESH_SECRET = "refresh-secret-for-tests-0123456789"


def _service(clock=None) -> JwtTokenService:
    kwargs = {"clock": clock} if clock is not None else {}
    return JwtTokenService(
        access_secret=ACCESS_SECRET,
        refresh_secret=REFRESH_SECRET,
        access_ttl_minutes=15,
        refresh_ttl_days=7,
        **kwargs,
    )


def test_access_token_round_trip():
    service = _service()

    issued = service.issue_access_token(user_id="user-1")

    assert service.verify_access_token(token=issued.token) == TokenValid(user_id="user-1")
    payload = jwt.decode(issued.token, ACCESS_SECRET, algorithms=["HS256"])
    assert payload["id"] == "user-1"
    assert payload["type"] == "access"
    assert payload["exp"] - payload["iat"] == 15 * 60


def test_refresh_token_expires_after_configured_days():
    now = datetime.now(timezone.utc)
    service = _service(clock=lambda: now)

    issued = service.issue_refresh_token(user_id="user-1")

    assert issued.expires_at == now + timedelta(days=7)
    assert service.verify_refresh_token(token=issued.token) == TokenValid(user_id="user-1")


def test_tokens_do_not_cross_verify():
    service = _service()
    access = service.issue_access_token(user_id="user-1")
    refresh = service.issue_refresh_token(user_id="user-1")

    assert isinstance(service.verify_refresh_token(token=access.token), TokenInvalid)
    assert isinstance(service.verify_access_token(token=refresh.token), TokenInvalid)


def test_type_claim_is_checked_even_with_the_right_secret():
    service = _service()
    forged = jwt.encode({"id": "user-1", "type": "refresh"}, ACCESS_SECRET, algorithm="HS256")

    assert service.verify_access_token(token=forged) == TokenInvalid(reason="wrong_type")


def test_expired_access_token_is_reported_not_raised():
    past = datetime(2020, 1, 1, tzinfo=timezone.utc)
    issued = _service(clock=lambda: past).issue_access_token(user_id="user-1")

    assert _service().verify_access_token(token=issued.token) == TokenInvalid(reason="expired")


@pytest.mark.parametrize("token", ["", "not-a-jwt", "a.b.c"])
def test_malformed_tokens_are_invalid(token):
    assert isinstance(_service().verify_access_token(token=token), TokenInvalid)


def test_token_signed_with_other_secret_is_invalid():
    foreign = jwt.encode({"id": "user-1", "type": "access"}, "some-other-secret-value-0123456789", algorithm="HS256")

    assert _service().verify_access_token(token=foreign) == TokenInvalid(reason="malformed")


def test_equal_secrets_are_refused():
    with pytest.raises(ValueError):
        JwtTokenService(
            access_secret=ACCESS_SECRET,
            refresh_secret=ACCESS_SECRET,
            access_ttl_minutes=15,
            refresh_ttl_days=7,
        )
