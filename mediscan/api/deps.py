from __future__ import annotations

from datetime import timedelta

from fastapi import Cookie, Depends, Header, Request, Response

from mediscan.api.context import AppContext
from mediscan.application.dto.auth import AuthenticateRequestInput
from mediscan.application.ports.accounts_port import AccountsPort
from mediscan.application.ports.chats_port import ChatsPort
from mediscan.application.ports.external_identity_port import ExternalIdentityPort
from mediscan.application.ports.health_records_port import HealthRecordsPort
from mediscan.application.ports.password_hasher_port import PasswordHasherPort
from mediscan.application.ports.token_port import TokenPort
from mediscan.application.ports.vision_port import VisionPort
from mediscan.application.use_cases.add_health_record import AddHealthRecordUseCase
from mediscan.application.use_cases.analyze_image import AnalyzeImageUseCase
from mediscan.application.use_cases.authenticate_request import AuthenticateRequestUseCase
from mediscan.application.use_cases.create_chat import CreateChatUseCase
from mediscan.application.use_cases.delete_chat import DeleteChatUseCase
from mediscan.application.use_cases.delete_health_record import DeleteHealthRecordUseCase
from mediscan.application.use_cases.get_chat import GetChatUseCase
from mediscan.application.use_cases.get_profile import GetProfileUseCase
from mediscan.application.use_cases.list_chats import ListChatsUseCase
from mediscan.application.use_cases.list_health_records import ListHealthRecordsUseCase
from mediscan.application.use_cases.list_users import ListUsersUseCase
from mediscan.application.use_cases.login_external import LoginExternalUseCase
from mediscan.application.use_cases.login_local import LoginLocalUseCase
from mediscan.application.use_cases.refresh_session import RefreshSessionUseCase
from mediscan.application.use_cases.register_user import RegisterUserUseCase
from mediscan.application.use_cases.send_chat_message import SendChatMessageUseCase
from mediscan.application.use_cases.update_health_record import UpdateHealthRecordUseCase
from mediscan.application.use_cases.update_preferences import UpdatePreferencesUseCase
from mediscan.application.use_cases.update_profile import UpdateProfileUseCase
from mediscan.domain.entities.user import UserProfile
from mediscan.domain.exceptions import ForbiddenError
from mediscan.shared.config import Settings


REFRESH_COOKIE_NAME = "refreshToken"
_BEARER_PREFIX = "Bearer "


def get_app_context(request: Request) -> AppContext:
    return request.app.state.context


def get_settings_dep(context: AppContext = Depends(get_app_context)) -> Settings:
    return context.settings


def get_accounts_repository(context: AppContext = Depends(get_app_context)) -> AccountsPort:
    return context.accounts_repository


def get_chats_repository(context: AppContext = Depends(get_app_context)) -> ChatsPort:
    return context.chats_repository


def get_health_records_repository(context: AppContext = Depends(get_app_context)) -> HealthRecordsPort:
    return context.health_records_repository


def get_password_hasher(context: AppContext = Depends(get_app_context)) -> PasswordHasherPort:
    return context.password_hasher


def get_token_service(context: AppContext = Depends(get_app_context)) -> TokenPort:
    return context.token_service


def get_identity_client(context: AppContext = Depends(get_app_context)) -> ExternalIdentityPort:
    return context.identity_client


def get_vision_client(context: AppContext = Depends(get_app_context)) -> VisionPort:
    return context.vision_client


def get_register_user_use_case(
    accounts_port: AccountsPort = Depends(get_accounts_repository),
    password_hasher: PasswordHasherPort = Depends(get_password_hasher),
    token_port: TokenPort = Depends(get_token_service),
) -> RegisterUserUseCase:
    return RegisterUserUseCase(
        accounts_port=accounts_port,
        password_hasher=password_hasher,
        token_port=token_port,
    )


def get_login_local_use_case(
    settings: Settings = Depends(get_settings_dep),
    accounts_port: AccountsPort = Depends(get_accounts_repository),
    password_hasher: PasswordHasherPort = Depends(get_password_hasher),
    token_port: TokenPort = Depends(get_token_service),
) -> LoginLocalUseCase:
    return LoginLocalUseCase(
        accounts_port=accounts_port,
        password_hasher=password_hasher,
        token_port=token_port,
        max_attempts=settings.login_max_attempts,
        lock_duration=timedelta(minutes=settings.login_lock_minutes),
    )


def get_login_external_use_case(
    accounts_port: AccountsPort = Depends(get_accounts_repository),
    identity_port: ExternalIdentityPort = Depends(get_identity_client),
    token_port: TokenPort = Depends(get_token_service),
) -> LoginExternalUseCase:
    return LoginExternalUseCase(
        accounts_port=accounts_port,
        identity_port=identity_port,
        token_port=token_port,
    )


def get_refresh_session_use_case(
    accounts_port: AccountsPort = Depends(get_accounts_repository),
    token_port: TokenPort = Depends(get_token_service),
) -> RefreshSessionUseCase:
    return RefreshSessionUseCase(accounts_port=accounts_port, token_port=token_port)


def get_authenticate_request_use_case(
    accounts_port: AccountsPort = Depends(get_accounts_repository),
    token_port: TokenPort = Depends(get_token_service),
) -> AuthenticateRequestUseCase:
    return AuthenticateRequestUseCase(accounts_port=accounts_port, token_port=token_port)


def get_get_profile_use_case(
    accounts_port: AccountsPort = Depends(get_accounts_repository),
) -> GetProfileUseCase:
    return GetProfileUseCase(accounts_port=accounts_port)


def get_update_profile_use_case(
    accounts_port: AccountsPort = Depends(get_accounts_repository),
) -> UpdateProfileUseCase:
    return UpdateProfileUseCase(accounts_port=accounts_port)


def get_update_preferences_use_case(
    accounts_port: AccountsPort = Depends(get_accounts_repository),
) -> UpdatePreferencesUseCase:
    return UpdatePreferencesUseCase(accounts_port=accounts_port)


def get_list_users_use_case(
    accounts_port: AccountsPort = Depends(get_accounts_repository),
) -> ListUsersUseCase:
    return ListUsersUseCase(accounts_port=accounts_port)


def get_list_chats_use_case(chats_port: ChatsPort = Depends(get_chats_repository)) -> ListChatsUseCase:
    return ListChatsUseCase(chats_port=chats_port)


def get_get_chat_use_case(chats_port: ChatsPort = Depends(get_chats_repository)) -> GetChatUseCase:
    return GetChatUseCase(chats_port=chats_port)


def get_create_chat_use_case(chats_port: ChatsPort = Depends(get_chats_repository)) -> CreateChatUseCase:
    return CreateChatUseCase(chats_port=chats_port)


def get_send_chat_message_use_case(
    chats_port: ChatsPort = Depends(get_chats_repository),
) -> SendChatMessageUseCase:
    return SendChatMessageUseCase(chats_port=chats_port)


def get_delete_chat_use_case(chats_port: ChatsPort = Depends(get_chats_repository)) -> DeleteChatUseCase:
    return DeleteChatUseCase(chats_port=chats_port)


def get_analyze_image_use_case(vision_port: VisionPort = Depends(get_vision_client)) -> AnalyzeImageUseCase:
    return AnalyzeImageUseCase(vision_port=vision_port)


def get_add_health_record_use_case(
    health_records_port: HealthRecordsPort = Depends(get_health_records_repository),
) -> AddHealthRecordUseCase:
    return AddHealthRecordUseCase(health_records_port=health_records_port)


def get_list_health_records_use_case(
    health_records_port: HealthRecordsPort = Depends(get_health_records_repository),
) -> ListHealthRecordsUseCase:
    return ListHealthRecordsUseCase(health_records_port=health_records_port)


def get_delete_health_record_use_case(
    health_records_port: HealthRecordsPort = Depends(get_health_records_repository),
) -> DeleteHealthRecordUseCase:
    return DeleteHealthRecordUseCase(health_records_port=health_records_port)


def get_update_health_record_use_case(
    health_records_port: HealthRecordsPort = Depends(get_health_records_repository),
) -> UpdateHealthRecordUseCase:
    return UpdateHealthRecordUseCase(health_records_port=health_records_port)


def _bearer_token(authorization: str | None) -> str | None:
    if not authorization or not authorization.startswith(_BEARER_PREFIX):
        return None
    token = authorization[len(_BEARER_PREFIX):].strip()
    return token or None


def protect(
    response: Response,
    authorization: str | None = Header(default=None),
    refresh_token: str | None = Cookie(default=None, alias=REFRESH_COOKIE_NAME),
    use_case: AuthenticateRequestUseCase = Depends(get_authenticate_request_use_case),
) -> UserProfile:
    result = use_case.execute(
        AuthenticateRequestInput(
            access_token=_bearer_token(authorization),
            refresh_token=refresh_token,
        )
    )
    if result.renewed_access_token:
        response.headers["Authorization"] = f"{_BEARER_PREFIX}{result.renewed_access_token}"
    return result.user


def require_admin(user: UserProfile = Depends(protect)) -> UserProfile:
    if not user.is_admin:
        raise ForbiddenError("Not authorized as admin")
    return user


def require_record_access(user_id: str, user: UserProfile = Depends(protect)) -> UserProfile:
    if not user.is_admin and user.id != user_id:
        raise ForbiddenError("Not authorized to access these records")
    return user
