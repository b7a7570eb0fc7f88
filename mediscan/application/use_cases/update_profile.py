from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping

from mediscan.application.dto.profile import ProfileUpdate, UpdateProfileInput
from mediscan.application.ports.accounts_port import AccountsPort
from mediscan.domain.entities.user import UserProfile
from mediscan.domain.exceptions import (
    BadRequestError,
    DisallowedFieldsError,
    EmailAlreadyExistsError,
    UserNotFoundError,
    UsernameAlreadyExistsError,
)

from .auth_common import normalize_email, utcnow


logger = logging.getLogger(__name__)


@dataclass
class _ProfileDraft:
    first_name: str
    last_name: str
    email: str
    username: str
    phone: str | None
    profile: dict[str, Any]

    @classmethod
    def from_user(cls, user: UserProfile) -> _ProfileDraft:
        return cls(
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email,
            username=user.username,
            phone=user.phone,
            profile=copy.deepcopy(user.profile),
        )

    def to_update(self) -> ProfileUpdate:
        return ProfileUpdate(
            first_name=self.first_name,
            last_name=self.last_name,
            email=self.email,
            username=self.username,
            phone=self.phone,
            profile=self.profile,
        )


def _required_text(field: str, value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise BadRequestError(f"{field} must be a non-empty string")
    return value.strip()


def _optional_text(field: str, value: Any) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise BadRequestError(f"{field} must be a string")
    return value.strip() or None


def _number(field: str, value: Any) -> float | int:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise BadRequestError(f"{field} must be a positive number")
    return value


def _text_list(field: str, value: Any) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise BadRequestError(f"{field} must be a list of strings")
    return [item.strip() for item in value if item.strip()]


def _mapping(field: str, value: Any) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise BadRequestError(f"{field} must be an object")
    return value


def _set_first_name(draft: _ProfileDraft, value: Any) -> None:
    draft.first_name = _required_text("firstName", value)


def _set_last_name(draft: _ProfileDraft, value: Any) -> None:
    draft.last_name = _required_text("lastName", value)


def _set_email(draft: _ProfileDraft, value: Any) -> None:
    email = normalize_email(_required_text("email", value))
    if "@" not in email:
        raise BadRequestError("email must be a valid email address")
    draft.email = email


def _set_username(draft: _ProfileDraft, value: Any) -> None:
    username = _required_text("username", value)
    if any(ch.isspace() for ch in username):
        raise BadRequestError("username must not contain spaces")
    draft.username = username


def _set_phone(draft: _ProfileDraft, value: Any) -> None:
    draft.phone = _optional_text("phone", value)


def _set_location(draft: _ProfileDraft, value: Any) -> None:
    address = draft.profile.setdefault("address", {})
    address["city"] = _optional_text("location", value)


# health.<key> -> (stored key, validator)
_HEALTH_FIELDS: dict[str, tuple[str, Callable[[str, Any], Any]]] = {
    "bloodType": ("bloodType", _optional_text),
    "height": ("height", _number),
    "weight": ("weight", _number),
    "allergies": ("allergies", _text_list),
    "medications": ("chronicConditions", _text_list),
}

_EMERGENCY_CONTACT_FIELDS = ("name", "relationship", "phone")


def _set_health(draft: _ProfileDraft, value: Any) -> None:
    health = _mapping("health", value)
    health_doc = draft.profile.setdefault("health", {})
    for key, raw in health.items():
        stored_key, validator = _HEALTH_FIELDS[key]
        health_doc[stored_key] = validator(f"health.{key}", raw)


def _set_emergency_contact(draft: _ProfileDraft, value: Any) -> None:
    contact = _mapping("emergencyContact", value)
    draft.profile["emergencyContact"] = {
        key: _optional_text(f"emergencyContact.{key}", contact.get(key))
        for key in _EMERGENCY_CONTACT_FIELDS
    }


PROFILE_FIELD_SETTERS: dict[str, Callable[[_ProfileDraft, Any], None]] = {
    "firstName": _set_first_name,
    "lastName": _set_last_name,
    "email": _set_email,
    "username": _set_username,
    "phone": _set_phone,
    "location": _set_location,
    "health": _set_health,
    "emergencyContact": _set_emergency_contact,
}

_NESTED_ALLOWED: dict[str, tuple[str, ...]] = {
    "health": tuple(_HEALTH_FIELDS),
    "emergencyContact": _EMERGENCY_CONTACT_FIELDS,
}


def disallowed_fields(changes: Mapping[str, Any]) -> list[str]:
    rejected = [key for key in changes if key not in PROFILE_FIELD_SETTERS]
    for key, allowed in _NESTED_ALLOWED.items():
        nested = changes.get(key)
        if isinstance(nested, Mapping):
            rejected.extend(f"{key}.{sub}" for sub in nested if sub not in allowed)
    return rejected


class UpdateProfileUseCase:
    def __init__(self, *, accounts_port: AccountsPort):
        self._accounts_port = accounts_port

    def execute(self, command: UpdateProfileInput) -> UserProfile:
        changes = command.changes
        if not changes:
            raise BadRequestError("Update data is required")

        rejected = disallowed_fields(changes)
        if rejected:
            raise DisallowedFieldsError(rejected)

        user = self._accounts_port.get_user_by_id(user_id=command.user_id)
        if user is None:
            raise UserNotFoundError()

        draft = _ProfileDraft.from_user(user)
        for key, value in changes.items():
            PROFILE_FIELD_SETTERS[key](draft, value)

        if draft.email != user.email:
            existing = self._accounts_port.get_user_by_email(email=draft.email)
            if existing is not None and existing.id != user.id:
                raise EmailAlreadyExistsError("Email already in use")
        if draft.username != user.username:
            existing = self._accounts_port.get_user_by_username(username=draft.username)
            if existing is not None and existing.id != user.id:
                raise UsernameAlreadyExistsError()

        updated = self._accounts_port.update_profile(
            user_id=user.id,
            update=draft.to_update(),
            now=utcnow(),
        )
        if updated is None:
            raise UserNotFoundError()
        logger.info("update_profile: updated user_id=%s fields=%s", user.id, ",".join(sorted(changes)))
        return updated
