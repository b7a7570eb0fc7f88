from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ApiResponse(BaseModel):
    statusCode: int
    message: str
    data: Any = None
    errors: list[Any] = Field(default_factory=list)
    success: bool


def api_response(data: Any = None, *, status_code: int = 200, message: str = "Success") -> ApiResponse:
    return ApiResponse(
        statusCode=status_code,
        message=message,
        data=data,
        errors=[],
        success=200 <= status_code < 300,
    )
