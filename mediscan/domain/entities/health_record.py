from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Literal


RecordType = Literal["vitalSigns", "medications", "appointments", "conditions", "allergies"]
RECORD_TYPES: tuple[RecordType, ...] = (
    "vitalSigns",
    "medications",
    "appointments",
    "conditions",
    "allergies",
)


@dataclass(frozen=True)
class HealthRecordEntry:
    id: str
    user_id: str
    record_type: RecordType
    data: dict[str, Any]
    created_at: datetime
