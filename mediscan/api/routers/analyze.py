from __future__ import annotations

from fastapi import APIRouter, Depends

from mediscan.api.deps import get_analyze_image_use_case, protect
from mediscan.api.schemas.analyze import AnalyzeRequest
from mediscan.api.schemas.common import ApiResponse, api_response
from mediscan.application.dto.analyze import AnalyzeImageInput
from mediscan.application.use_cases.analyze_image import AnalyzeImageUseCase
from mediscan.domain.entities.user import UserProfile


router = APIRouter(prefix="/api")


@router.post("/analyze", response_model=ApiResponse)
def analyze_image(
    req: AnalyzeRequest,
    _user: UserProfile = Depends(protect),
    use_case: AnalyzeImageUseCase = Depends(get_analyze_image_use_case),
):
    output = use_case.execute(AnalyzeImageInput(image=req.image))
    return api_response(output.analysis, message="Image analyzed successfully")
