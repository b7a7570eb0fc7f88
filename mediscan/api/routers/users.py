from __future__ import annotations

from fastapi import APIRouter, Depends

from mediscan.api.deps import get_list_users_use_case, require_admin
from mediscan.api.schemas.common import ApiResponse, api_response
from mediscan.api.schemas.profile import profile_payload
from mediscan.application.use_cases.list_users import ListUsersUseCase
from mediscan.domain.entities.user import UserProfile


router = APIRouter(prefix="/api/users")


@router.get("", response_model=ApiResponse)
def list_users(
    _admin: UserProfile = Depends(require_admin),
    use_case: ListUsersUseCase = Depends(get_list_users_use_case),
):
    users = use_case.execute()
    return api_response([profile_payload(user) for user in users], message="Users retrieved")
