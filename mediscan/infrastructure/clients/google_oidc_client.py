from __future__ import annotations

from google.auth import exceptions as google_auth_exceptions
from google.auth.transport import requests
from google.oauth2 import id_token

from mediscan.application.dto.auth import ExternalIdentityInfo
from mediscan.application.ports.external_identity_port import ExternalIdentityPort
from mediscan.domain.exceptions import ExternalTokenValidationError


GOOGLE_PROVIDER = "google"


class GoogleOidcClient(ExternalIdentityPort):
    def __init__(self, *, client_id: str):
        self._client_id = client_id

    def verify_id_token(self, *, id_token: str) -> ExternalIdentityInfo:
        if not self._client_id:
            raise ExternalTokenValidationError("Google sign-in is not configured.")
        try:
            payload = id_token_verify(token=id_token, audience=self._client_id)
        except (ValueError, google_auth_exceptions.GoogleAuthError) as exc:
            raise ExternalTokenValidationError("Invalid Google id_token.") from exc
        return map_claims_to_identity(payload)


def map_claims_to_identity(payload: dict) -> ExternalIdentityInfo:
    email = payload.get("email")
    subject = payload.get("sub")
    if not email or not subject:
        raise ExternalTokenValidationError("Google id_token missing required claims.")

    email_verified_raw = payload.get("email_verified", False)
    email_verified = bool(email_verified_raw)
    if isinstance(email_verified_raw, str):
        email_verified = email_verified_raw.lower() == "true"

    return ExternalIdentityInfo(
        provider=GOOGLE_PROVIDER,
        subject=str(subject),
        email=str(email),
        email_verified=email_verified,
        first_name=_claim(payload, "given_name"),
        last_name=_claim(payload, "family_name"),
    )


def _claim(payload: dict, key: str) -> str | None:
    value = payload.get(key)
    return value if isinstance(value, str) and value else None


def id_token_verify(*, token: str, audience: str) -> dict:
    request = requests.Request()
    return id_token.verify_oauth2_token(token, request, audience)
