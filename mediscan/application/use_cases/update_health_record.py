from __future__ import annotations

import copy
import logging
from datetime import datetime
from typing import Any, Callable, Mapping

from mediscan.application.dto.health_records import UpdateHealthRecordInput
from mediscan.application.ports.health_records_port import HealthRecordsPort
from mediscan.domain.entities.health_record import HealthRecordEntry, RecordType
from mediscan.domain.exceptions import BadRequestError, DisallowedFieldsError, HealthRecordNotFoundError

from .auth_common import utcnow


logger = logging.getLogger(__name__)

FieldMerger = Callable[[dict[str, Any], str, Any, datetime], None]


def _assign(data: dict[str, Any], key: str, value: Any, _now: datetime) -> None:
    data[key] = value


_REFILL_FIELDS = ("remaining", "total", "nextRefillDate")


def _merge_refills(data: dict[str, Any], key: str, value: Any, now: datetime) -> None:
    if not isinstance(value, Mapping):
        raise BadRequestError("refills must be an object")
    rejected = [f"refills.{sub}" for sub in value if sub not in _REFILL_FIELDS]
    if rejected:
        raise DisallowedFieldsError(rejected)
    refills = data.setdefault(key, {})
    refills.update(value)
    if "remaining" in value:
        refills["lastRefillDate"] = now.isoformat()


def _fields(*keys: str, **special: FieldMerger) -> dict[str, FieldMerger]:
    mergers: dict[str, FieldMerger] = {key: _assign for key in keys}
    mergers.update(special)
    return mergers


RECORD_FIELD_MERGERS: dict[RecordType, dict[str, FieldMerger]] = {
    "vitalSigns": _fields("type", "value", "unit", "timestamp", "notes"),
    "allergies": _fields("name", "severity", "diagnosed", "symptoms", "notes"),
    "conditions": _fields("name", "status", "diagnosed", "treatments", "notes"),
    "medications": _fields(
        "name",
        "dosage",
        "frequency",
        "startDate",
        "endDate",
        "prescribedBy",
        "purpose",
        "status",
        refills=_merge_refills,
    ),
    "appointments": _fields("type", "provider", "date", "location", "status", "notes", "followUp"),
}


class UpdateHealthRecordUseCase:
    def __init__(
        self,
        *,
        health_records_port: HealthRecordsPort,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._health_records_port = health_records_port
        self._clock = clock

    def execute(self, command: UpdateHealthRecordInput) -> HealthRecordEntry:
        changes = command.changes
        if not changes:
            raise BadRequestError("Update data is required")

        entry = self._health_records_port.get_entry(user_id=command.user_id, entry_id=command.record_id)
        if entry is None:
            raise HealthRecordNotFoundError()

        mergers = RECORD_FIELD_MERGERS[entry.record_type]
        rejected = [key for key in changes if key not in mergers]
        if rejected:
            raise DisallowedFieldsError(rejected)

        now = self._clock()
        data = copy.deepcopy(entry.data)
        for key, value in changes.items():
            mergers[key](data, key, value, now)

        updated = self._health_records_port.update_entry(
            user_id=command.user_id,
            entry_id=command.record_id,
            data=data,
        )
        if updated is None:
            raise HealthRecordNotFoundError()
        logger.info(
            "update_health_record: updated record_id=%s type=%s fields=%s",
            entry.id,
            entry.record_type,
            ",".join(sorted(changes)),
        )
        return updated
