from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Query

from mediscan.api.deps import (
    get_add_health_record_use_case,
    get_delete_health_record_use_case,
    get_list_health_records_use_case,
    get_update_health_record_use_case,
    require_record_access,
)
from mediscan.api.schemas.common import ApiResponse, api_response
from mediscan.api.schemas.health_records import AddHealthRecordRequest, health_record_payload
from mediscan.application.dto.health_records import (
    AddHealthRecordInput,
    ListHealthRecordsInput,
    UpdateHealthRecordInput,
)
from mediscan.application.use_cases.add_health_record import AddHealthRecordUseCase
from mediscan.application.use_cases.delete_health_record import DeleteHealthRecordUseCase
from mediscan.application.use_cases.list_health_records import ListHealthRecordsUseCase
from mediscan.application.use_cases.update_health_record import UpdateHealthRecordUseCase
from mediscan.domain.entities.user import UserProfile


router = APIRouter(prefix="/api/health/records")


@router.get("/{user_id}", response_model=ApiResponse)
def list_health_records(
    user_id: str,
    record_type: str | None = Query(default=None, alias="type"),
    _user: UserProfile = Depends(require_record_access),
    use_case: ListHealthRecordsUseCase = Depends(get_list_health_records_use_case),
):
    entries = use_case.execute(ListHealthRecordsInput(user_id=user_id, record_type=record_type))
    return api_response([health_record_payload(entry) for entry in entries], message="Health records retrieved")


@router.post("/{user_id}", response_model=ApiResponse, status_code=201)
def add_health_record(
    user_id: str,
    req: AddHealthRecordRequest,
    _user: UserProfile = Depends(require_record_access),
    use_case: AddHealthRecordUseCase = Depends(get_add_health_record_use_case),
):
    entry = use_case.execute(AddHealthRecordInput(user_id=user_id, record_type=req.type, data=req.data))
    return api_response(health_record_payload(entry), status_code=201, message="Health record added")


@router.put("/{user_id}/{record_id}", response_model=ApiResponse)
def update_health_record(
    user_id: str,
    record_id: str,
    changes: dict[str, Any] | None = Body(default=None),
    _user: UserProfile = Depends(require_record_access),
    use_case: UpdateHealthRecordUseCase = Depends(get_update_health_record_use_case),
):
    entry = use_case.execute(UpdateHealthRecordInput(user_id=user_id, record_id=record_id, changes=changes or {}))
    return api_response(health_record_payload(entry), message="Health record updated")


@router.delete("/{user_id}/{record_id}", response_model=ApiResponse)
def delete_health_record(
    user_id: str,
    record_id: str,
    _user: UserProfile = Depends(require_record_access),
    use_case: DeleteHealthRecordUseCase = Depends(get_delete_health_record_use_case),
):
    use_case.execute(user_id=user_id, record_id=record_id)
    return api_response(None, message="Health record deleted")
