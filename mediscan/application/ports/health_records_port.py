from __future__ import annotations

from datetime import datetime
from typing import Any, Protocol

from mediscan.domain.entities.health_record import HealthRecordEntry, RecordType


class HealthRecordsPort(Protocol):
    def add_entry(
        self,
        *,
        entry_id: str,
        user_id: str,
        record_type: RecordType,
        data: dict[str, Any],
        created_at: datetime,
    ) -> HealthRecordEntry:
        ...

    def list_entries(self, *, user_id: str, record_type: RecordType | None) -> list[HealthRecordEntry]:
        ...

    def get_entry(self, *, user_id: str, entry_id: str) -> HealthRecordEntry | None:
        ...

    def update_entry(self, *, user_id: str, entry_id: str, data: dict[str, Any]) -> HealthRecordEntry | None:
        ...

    def delete_entry(self, *, user_id: str, entry_id: str) -> bool:
        ...
