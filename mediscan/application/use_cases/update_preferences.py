from __future__ import annotations

import copy
from typing import Any, Callable, Mapping

from mediscan.application.dto.profile import UpdatePreferencesInput
from mediscan.application.ports.accounts_port import AccountsPort
from mediscan.domain.entities.user import UserProfile
from mediscan.domain.exceptions import BadRequestError, DisallowedFieldsError, UserNotFoundError

from .auth_common import default_settings, utcnow


THEMES = ("light", "dark", "system")
NOTIFICATION_CHANNELS = ("email", "push", "sms")


def _set_language(settings: dict[str, Any], value: Any) -> None:
    if not isinstance(value, str) or not value.strip():
        raise BadRequestError("language must be a non-empty string")
    settings["language"] = value.strip()


def _set_theme(settings: dict[str, Any], value: Any) -> None:
    if value not in THEMES:
        raise BadRequestError(f"theme must be one of: {', '.join(THEMES)}")
    settings["theme"] = value


def _set_timezone(settings: dict[str, Any], value: Any) -> None:
    if value is not None and not isinstance(value, str):
        raise BadRequestError("timezone must be a string")
    settings["timezone"] = value


def _set_notifications(settings: dict[str, Any], value: Any) -> None:
    if not isinstance(value, Mapping):
        raise BadRequestError("notifications must be an object")
    notifications = settings.setdefault("notifications", {})
    for channel, enabled in value.items():
        if not isinstance(enabled, bool):
            raise BadRequestError(f"notifications.{channel} must be a boolean")
        notifications[channel] = enabled


PREFERENCE_SETTERS: dict[str, Callable[[dict[str, Any], Any], None]] = {
    "language": _set_language,
    "theme": _set_theme,
    "timezone": _set_timezone,
    "notifications": _set_notifications,
}


class UpdatePreferencesUseCase:
    def __init__(self, *, accounts_port: AccountsPort):
        self._accounts_port = accounts_port

    def execute(self, command: UpdatePreferencesInput) -> UserProfile:
        changes = command.changes
        if not changes:
            raise BadRequestError("Update data is required")

        rejected = [key for key in changes if key not in PREFERENCE_SETTERS]
        notifications = changes.get("notifications")
        if isinstance(notifications, Mapping):
            rejected.extend(
                f"notifications.{channel}"
                for channel in notifications
                if channel not in NOTIFICATION_CHANNELS
            )
        if rejected:
            raise DisallowedFieldsError(rejected)

        user = self._accounts_port.get_user_by_id(user_id=command.user_id)
        if user is None:
            raise UserNotFoundError()

        settings = default_settings()
        settings.update(copy.deepcopy(user.settings))
        for key, value in changes.items():
            PREFERENCE_SETTERS[key](settings, value)

        updated = self._accounts_port.update_settings(user_id=user.id, settings=settings, now=utcnow())
        if updated is None:
            raise UserNotFoundError()
        return updated
