from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from mediscan.infrastructure.db.engine import Base


class HealthRecordEntryModel(Base):
    __tablename__ = "health_record_entries"
    __table_args__ = (Index("ix_health_record_entries_user_type", "user_id", "record_type"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), nullable=False)
    record_type: Mapped[str] = mapped_column(String(32), nullable=False)
    data: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


HEALTH_RECORD_ENTRIES = HealthRecordEntryModel.__table__
