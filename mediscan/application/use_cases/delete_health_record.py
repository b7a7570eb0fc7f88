from __future__ import annotations

from mediscan.application.ports.health_records_port import HealthRecordsPort
from mediscan.domain.exceptions import HealthRecordNotFoundError


class DeleteHealthRecordUseCase:
    def __init__(self, *, health_records_port: HealthRecordsPort):
        self._health_records_port = health_records_port

    def execute(self, *, user_id: str, record_id: str) -> None:
        if not self._health_records_port.delete_entry(user_id=user_id, entry_id=record_id):
            raise HealthRecordNotFoundError()
