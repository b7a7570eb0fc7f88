from __future__ import annotations

from typing import Mapping
from uuid import uuid4

from mediscan.application.dto.health_records import AddHealthRecordInput
from mediscan.application.ports.health_records_port import HealthRecordsPort
from mediscan.domain.entities.health_record import RECORD_TYPES, HealthRecordEntry, RecordType
from mediscan.domain.exceptions import BadRequestError, InvalidRecordTypeError

from .auth_common import utcnow


def validate_record_type(record_type: str) -> RecordType:
    if record_type not in RECORD_TYPES:
        raise InvalidRecordTypeError()
    return record_type  # type: ignore[return-value]


class AddHealthRecordUseCase:
    def __init__(self, *, health_records_port: HealthRecordsPort):
        self._health_records_port = health_records_port

    def execute(self, command: AddHealthRecordInput) -> HealthRecordEntry:
        if not command.record_type or not command.data:
            raise BadRequestError("Record type and data are required")
        if not isinstance(command.data, Mapping):
            raise BadRequestError("Record data must be an object")

        return self._health_records_port.add_entry(
            entry_id=str(uuid4()),
            user_id=command.user_id,
            record_type=validate_record_type(command.record_type),
            data=dict(command.data),
            created_at=utcnow(),
        )
