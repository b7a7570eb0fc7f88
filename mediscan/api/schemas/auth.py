from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from mediscan.application.dto.auth import AuthSessionOutput


class RegisterRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: str = Field(..., max_length=255)
    password: str = Field(..., max_length=256)
    first_name: str = Field(..., alias="firstName", max_length=120)
    last_name: str = Field(..., alias="lastName", max_length=120)


class LoginRequest(BaseModel):
    email: str = Field(..., max_length=255)
    password: str = Field(..., max_length=256)


class ExternalLoginRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id_token: str = Field(..., alias="idToken")


def session_payload(output: AuthSessionOutput) -> dict:
    user = output.user
    return {
        "user": {
            "_id": user.id,
            "email": user.email,
            "firstName": user.first_name,
            "lastName": user.last_name,
            "role": user.role,
        },
        "accessToken": output.access_token,
    }
