from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.engine import Engine

from mediscan.infrastructure.clients.gemini_vision_client import (
    GeminiVisionClient,
    GeminiVisionClientSettings,
)
from mediscan.infrastructure.clients.google_oidc_client import GoogleOidcClient
from mediscan.infrastructure.db.engine import create_db_engine
from mediscan.infrastructure.db.repositories.accounts_repository import SqlAccountsRepository
from mediscan.infrastructure.db.repositories.chats_repository import SqlChatsRepository
from mediscan.infrastructure.db.repositories.health_records_repository import SqlHealthRecordsRepository
from mediscan.infrastructure.security.password_hasher import PasswordHasher
from mediscan.infrastructure.security.token_service import JwtTokenService
from mediscan.shared.config import Settings


@dataclass(frozen=True)
class AppContext:
    """Long-lived collaborators shared by every request of one application instance."""

    settings: Settings
    engine: Engine
    accounts_repository: SqlAccountsRepository
    chats_repository: SqlChatsRepository
    health_records_repository: SqlHealthRecordsRepository
    password_hasher: PasswordHasher
    token_service: JwtTokenService
    identity_client: GoogleOidcClient
    vision_client: GeminiVisionClient


def build_app_context(settings: Settings) -> AppContext:
    engine = create_db_engine(settings.database_url)
    return AppContext(
        settings=settings,
        engine=engine,
        accounts_repository=SqlAccountsRepository(engine),
        chats_repository=SqlChatsRepository(engine),
        health_records_repository=SqlHealthRecordsRepository(engine),
        password_hasher=PasswordHasher(),
        token_service=JwtTokenService(
            access_secret=settings.access_token_secret,
            refresh_secret=settings.refresh_token_secret,
            access_ttl_minutes=settings.access_token_ttl_minutes,
            refresh_ttl_days=settings.refresh_token_ttl_days,
        ),
        identity_client=GoogleOidcClient(client_id=settings.google_client_id),
        vision_client=GeminiVisionClient(
            GeminiVisionClientSettings(
                api_base=settings.gemini_api_base,
                api_key=settings.gemini_api_key,
                model=settings.gemini_model,
                timeout_seconds=settings.gemini_timeout_seconds,
            )
        ),
    )
