from __future__ import annotations

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mediscan.api.context import build_app_context
from mediscan.api.errors import register_exception_handlers
from mediscan.api.routers import analyze, auth, chats, health_records, system, users
from mediscan.infrastructure.db.engine import create_schema
from mediscan.shared.config import Settings, get_settings
from mediscan.shared.logging_setup import configure_logging


logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)
    context = build_app_context(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.db_create_all:
            create_schema(context.engine)
        logger.info("main: startup env=%s create_all=%s", settings.app_env, settings.db_create_all)
        yield
        context.engine.dispose()
        logger.info("main: shutdown")

    app = FastAPI(title="MediScan API", lifespan=lifespan)
    app.state.context = context
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        # Renewed access tokens travel back in this header.
        expose_headers=["Authorization"],
    )
    register_exception_handlers(app)

    app.include_router(system.router)
    app.include_router(auth.router)
    app.include_router(users.router)
    app.include_router(chats.router)
    app.include_router(analyze.router)
    app.include_router(health_records.router)
    return app

