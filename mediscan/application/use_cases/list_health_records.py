from __future__ import annotations

from mediscan.application.dto.health_records import ListHealthRecordsInput
from mediscan.application.ports.health_records_port import HealthRecordsPort
from mediscan.domain.entities.health_record import HealthRecordEntry

from .add_health_record import validate_record_type


class ListHealthRecordsUseCase:
    def __init__(self, *, health_records_port: HealthRecordsPort):
        self._health_records_port = health_records_port

    def execute(self, command: ListHealthRecordsInput) -> list[HealthRecordEntry]:
        record_type = validate_record_type(command.record_type) if command.record_type else None
        entries = self._health_records_port.list_entries(user_id=command.user_id, record_type=record_type)
        return sorted(entries, key=lambda entry: entry.created_at, reverse=True)
