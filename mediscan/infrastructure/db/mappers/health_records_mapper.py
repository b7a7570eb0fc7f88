from __future__ import annotations

from typing import Any, Mapping

from mediscan.domain.entities.health_record import HealthRecordEntry
from mediscan.infrastructure.db.mappers.accounts_mapper import as_utc


def map_row_to_health_record_entry(row: Mapping[str, Any]) -> HealthRecordEntry:
    return HealthRecordEntry(
        id=str(row["id"]),
        user_id=str(row["user_id"]),
        record_type=row["record_type"],
        data=dict(row["data"] or {}),
        created_at=as_utc(row["created_at"]),
    )
