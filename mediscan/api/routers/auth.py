from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Body, Cookie, Depends, Response

from mediscan.api.deps import (
    REFRESH_COOKIE_NAME,
    get_get_profile_use_case,
    get_login_external_use_case,
    get_login_local_use_case,
    get_refresh_session_use_case,
    get_register_user_use_case,
    get_settings_dep,
    get_update_preferences_use_case,
    get_update_profile_use_case,
    protect,
)
from mediscan.api.schemas.auth import ExternalLoginRequest, LoginRequest, RegisterRequest, session_payload
from mediscan.api.schemas.common import ApiResponse, api_response
from mediscan.api.schemas.profile import profile_payload
from mediscan.application.dto.auth import (
    AuthSessionOutput,
    LoginExternalInput,
    LoginLocalInput,
    RefreshSessionInput,
    RegisterUserInput,
)
from mediscan.application.dto.profile import UpdatePreferencesInput, UpdateProfileInput
from mediscan.application.use_cases.get_profile import GetProfileUseCase
from mediscan.application.use_cases.login_external import LoginExternalUseCase
from mediscan.application.use_cases.login_local import LoginLocalUseCase
from mediscan.application.use_cases.refresh_session import RefreshSessionUseCase
from mediscan.application.use_cases.register_user import RegisterUserUseCase
from mediscan.application.use_cases.update_preferences import UpdatePreferencesUseCase
from mediscan.application.use_cases.update_profile import UpdateProfileUseCase
from mediscan.domain.entities.user import UserProfile
from mediscan.shared.config import Settings


router = APIRouter(prefix="/api/auth")

_COOKIE_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _set_refresh_cookie(response: Response, refresh_token: str, settings: Settings) -> None:
    response.set_cookie(
        key=REFRESH_COOKIE_NAME,
        value=refresh_token,
        httponly=True,
        samesite="strict",
        secure=settings.is_production,
        max_age=settings.refresh_cookie_max_age_seconds,
        path="/",
    )


def _clear_refresh_cookie(response: Response, settings: Settings) -> None:
    response.set_cookie(
        key=REFRESH_COOKIE_NAME,
        value="",
        httponly=True,
        samesite="strict",
        secure=settings.is_production,
        expires=_COOKIE_EPOCH,
        path="/",
    )


def _session_response(
    response: Response,
    output: AuthSessionOutput,
    settings: Settings,
    *,
    status_code: int = 200,
    message: str,
) -> ApiResponse:
    _set_refresh_cookie(response, output.refresh_token, settings)
    return api_response(session_payload(output), status_code=status_code, message=message)


@router.post("/register", response_model=ApiResponse, status_code=201)
def register_user(
    req: RegisterRequest,
    response: Response,
    settings: Settings = Depends(get_settings_dep),
    use_case: RegisterUserUseCase = Depends(get_register_user_use_case),
):
    output = use_case.execute(
        RegisterUserInput(
            email=req.email,
            password=req.password,
            first_name=req.first_name,
            last_name=req.last_name,
        )
    )
    return _session_response(response, output, settings, status_code=201, message="User registered successfully")


@router.post("/login", response_model=ApiResponse)
def login_local(
    req: LoginRequest,
    response: Response,
    settings: Settings = Depends(get_settings_dep),
    use_case: LoginLocalUseCase = Depends(get_login_local_use_case),
):
    output = use_case.execute(LoginLocalInput(email=req.email, password=req.password))
    return _session_response(response, output, settings, message="Login successful")


@router.post("/external", response_model=ApiResponse)
def login_external(
    req: ExternalLoginRequest,
    response: Response,
    settings: Settings = Depends(get_settings_dep),
    use_case: LoginExternalUseCase = Depends(get_login_external_use_case),
):
    output = use_case.execute(LoginExternalInput(id_token=req.id_token))
    return _session_response(response, output, settings, message="Login successful")


@router.post("/refresh-token", response_model=ApiResponse)
def refresh_token(
    response: Response,
    refresh_token_cookie: str | None = Cookie(default=None, alias=REFRESH_COOKIE_NAME),
    settings: Settings = Depends(get_settings_dep),
    use_case: RefreshSessionUseCase = Depends(get_refresh_session_use_case),
):
    output = use_case.execute(RefreshSessionInput(refresh_token=refresh_token_cookie))
    return _session_response(response, output, settings, message="Token refreshed successfully")


@router.post("/logout", response_model=ApiResponse)
def logout(response: Response, settings: Settings = Depends(get_settings_dep)):
    _clear_refresh_cookie(response, settings)
    return api_response(None, message="Logged out successfully")


@router.get("/profile", response_model=ApiResponse)
def get_profile(
    user: UserProfile = Depends(protect),
    use_case: GetProfileUseCase = Depends(get_get_profile_use_case),
):
    return api_response(profile_payload(use_case.execute(user_id=user.id)), message="Profile retrieved")


@router.put("/profile", response_model=ApiResponse)
def update_profile(
    changes: dict[str, Any] | None = Body(default=None),
    user: UserProfile = Depends(protect),
    use_case: UpdateProfileUseCase = Depends(get_update_profile_use_case),
):
    updated = use_case.execute(UpdateProfileInput(user_id=user.id, changes=changes or {}))
    return api_response(profile_payload(updated), message="Profile updated successfully")


@router.put("/profile/preferences", response_model=ApiResponse)
def update_preferences(
    changes: dict[str, Any] | None = Body(default=None),
    user: UserProfile = Depends(protect),
    use_case: UpdatePreferencesUseCase = Depends(get_update_preferences_use_case),
):
    updated = use_case.execute(UpdatePreferencesInput(user_id=user.id, changes=changes or {}))
    return api_response(updated.settings, message="Preferences updated successfully")
