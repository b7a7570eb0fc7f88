from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping


@dataclass(frozen=True)
class AddHealthRecordInput:
    user_id: str
    record_type: str | None
    data: Any


@dataclass(frozen=True)
class ListHealthRecordsInput:
    user_id: str
    record_type: str | None = None


@dataclass(frozen=True)
class UpdateHealthRecordInput:
    user_id: str
    record_id: str
    changes: Mapping[str, Any]
