from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import delete, select, update
from sqlalchemy.engine import Engine

from mediscan.application.ports.health_records_port import HealthRecordsPort
from mediscan.domain.entities.health_record import HealthRecordEntry, RecordType
from mediscan.infrastructure.db.mappers.health_records_mapper import map_row_to_health_record_entry
from mediscan.infrastructure.db.models.health_records import HEALTH_RECORD_ENTRIES


class SqlHealthRecordsRepository(HealthRecordsPort):
    def __init__(self, engine: Engine):
        self._engine = engine

    def add_entry(
        self,
        *,
        entry_id: str,
        user_id: str,
        record_type: RecordType,
        data: dict[str, Any],
        created_at: datetime,
    ) -> HealthRecordEntry:
        with self._engine.begin() as conn:
            conn.execute(
                HEALTH_RECORD_ENTRIES.insert().values(
                    id=entry_id,
                    user_id=user_id,
                    record_type=record_type,
                    data=data,
                    created_at=created_at,
                )
            )
            row = (
                conn.execute(select(HEALTH_RECORD_ENTRIES).where(HEALTH_RECORD_ENTRIES.c.id == entry_id))
                .mappings()
                .one()
            )
        return map_row_to_health_record_entry(row)

    def list_entries(self, *, user_id: str, record_type: RecordType | None) -> list[HealthRecordEntry]:
        stmt = select(HEALTH_RECORD_ENTRIES).where(HEALTH_RECORD_ENTRIES.c.user_id == user_id)
        if record_type is not None:
            stmt = stmt.where(HEALTH_RECORD_ENTRIES.c.record_type == record_type)
        stmt = stmt.order_by(HEALTH_RECORD_ENTRIES.c.created_at.desc())
        with self._engine.connect() as conn:
            rows = conn.execute(stmt).mappings().all()
        return [map_row_to_health_record_entry(row) for row in rows]

    def get_entry(self, *, user_id: str, entry_id: str) -> HealthRecordEntry | None:
        stmt = select(HEALTH_RECORD_ENTRIES).where(
            HEALTH_RECORD_ENTRIES.c.id == entry_id,
            HEALTH_RECORD_ENTRIES.c.user_id == user_id,
        )
        with self._engine.connect() as conn:
            row = conn.execute(stmt).mappings().first()
        if row is None:
            return None
        return map_row_to_health_record_entry(row)

    def update_entry(self, *, user_id: str, entry_id: str, data: dict[str, Any]) -> HealthRecordEntry | None:
        owned = (
            HEALTH_RECORD_ENTRIES.c.id == entry_id,
            HEALTH_RECORD_ENTRIES.c.user_id == user_id,
        )
        with self._engine.begin() as conn:
            result = conn.execute(update(HEALTH_RECORD_ENTRIES).where(*owned).values(data=data))
            if result.rowcount == 0:
                return None
            row = conn.execute(select(HEALTH_RECORD_ENTRIES).where(*owned)).mappings().one()
        return map_row_to_health_record_entry(row)

    def delete_entry(self, *, user_id: str, entry_id: str) -> bool:
        stmt = delete(HEALTH_RECORD_ENTRIES).where(
            HEALTH_RECORD_ENTRIES.c.id == entry_id,
            HEALTH_RECORD_ENTRIES.c.user_id == user_id,
        )
        with self._engine.begin() as conn:
            result = conn.execute(stmt)
        return result.rowcount > 0
