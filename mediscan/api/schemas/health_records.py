from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from mediscan.domain.entities.health_record import HealthRecordEntry


class AddHealthRecordRequest(BaseModel):
    type: str | None = None
    data: Any = None


def health_record_payload(entry: HealthRecordEntry) -> dict[str, Any]:
    return {
        "_id": entry.id,
        "userId": entry.user_id,
        "type": entry.record_type,
        "data": entry.data,
        "createdAt": entry.created_at.isoformat(),
    }
