from __future__ import annotations

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool


class Base(DeclarativeBase):
    pass


def create_db_engine(dsn: str) -> Engine:
    if dsn.startswith("sqlite"):
        kwargs: dict = {"connect_args": {"check_same_thread": False}}
        if dsn in {"sqlite://", "sqlite:///:memory:"}:
            # Every connection must see the same in-memory database.
            kwargs["poolclass"] = StaticPool
        return create_engine(dsn, future=True, **kwargs)
    return create_engine(dsn, future=True, pool_pre_ping=True)


def create_schema(engine: Engine) -> None:
    # Table classes register on Base.metadata at import.
    from mediscan.infrastructure.db.models import accounts, chats, health_records  # noqa: F401

    Base.metadata.create_all(engine)
